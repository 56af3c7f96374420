"""
Tests for the command-line interface.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from answer_grader.main import app

runner = CliRunner()


class TestGradeCommand:
    """Tests for the grade command."""

    def test_grade_without_model(self) -> None:
        """Test grading a single answer with similarity grading."""
        result = runner.invoke(
            app,
            [
                "grade",
                "--question", "What is the capital of France?",
                "--expected", "Paris",
                "--answer", "paris",
                "--marks", "10",
                "--no-ai",
            ],
        )

        assert result.exit_code == 0
        assert "10 / 10" in result.output
        assert "Exact match" in result.output

    def test_grade_requires_api_key(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test a missing key for the AI tier is reported as a configuration error."""
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(
            app,
            ["grade", "-q", "Q?", "-e", "Paris", "-a", "Paris"],
        )

        assert result.exit_code == 1
        assert "Configuration Error" in result.output

    @pytest.mark.parametrize("api_key", ["", "short"])
    def test_no_ai_ignores_placeholder_key(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, api_key: str
    ) -> None:
        """Test --no-ai grades even when the environment holds an unusable key."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LLM_API_KEY", api_key)

        result = runner.invoke(
            app,
            ["grade", "-q", "Q?", "-e", "Paris", "-a", "Paris", "--no-ai"],
        )

        assert result.exit_code == 0
        assert "10 / 10" in result.output


class TestGradeSubmissionCommand:
    """Tests for the grade-submission command."""

    def test_grade_submission_file(self, tmp_path: Path) -> None:
        """Test grading a submission file prints the aggregate."""
        submission = {
            "questions": [
                {
                    "question_id": "q1",
                    "question": "What is the capital of France?",
                    "expected_answer": "Paris",
                    "student_answer": "Paris",
                    "total_marks": 10,
                },
                {
                    "question_id": "q2",
                    "question": "What is the largest planet?",
                    "expected_answer": "Jupiter",
                    "student_answer": "",
                    "total_marks": 5,
                },
            ]
        }
        path = tmp_path / "submission.json"
        path.write_text(json.dumps(submission), encoding="utf-8")

        result = runner.invoke(app, ["grade-submission", str(path), "--no-ai"])

        assert result.exit_code == 0
        assert "10 / 15" in result.output
        assert "Grade: C" in result.output
        assert "Unanswered: 1" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing submission file exits with an error."""
        result = runner.invoke(app, ["grade-submission", str(tmp_path / "none.json"), "--no-ai"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_malformed_file(self, tmp_path: Path) -> None:
        """Test an invalid submission file exits with an error."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"questions": [{"question_id": "q1"}]}), encoding="utf-8")

        result = runner.invoke(app, ["grade-submission", str(path), "--no-ai"])

        assert result.exit_code == 1
        assert "Submission Error" in result.output


class TestBatteryCommand:
    """Tests for the battery command."""

    def test_battery_reports_failures(self) -> None:
        """Test similarity grading misses the model-only cases and exits 1."""
        result = runner.invoke(app, ["battery", "--no-ai"])

        assert result.exit_code == 1
        assert "Passed:" in result.output


class TestHealthCommand:
    """Tests for the health command."""

    def test_health_without_ai(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test health passes when only similarity grading is configured."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("AI_GRADING_ENABLED", "false")

        result = runner.invoke(app, ["health"])

        assert result.exit_code == 0
        assert "AI grading disabled" in result.output
