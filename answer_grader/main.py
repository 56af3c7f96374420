"""
Answer Grader CLI Application.

Provides a command-line interface for grading student answers,
whole exam submissions, and running the calibration battery.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from answer_grader.calibration import BatteryReport, run_battery
from answer_grader.config import Settings, get_settings
from answer_grader.grading import GradingEngine, LLMClient
from answer_grader.models import GradingResult, QuestionSubmission, SubmissionResult
from answer_grader.submission import SubmissionGrader

# Create Typer app
app = typer.Typer(
    name="answer-grader",
    help="Grade free-text exam answers with a model-first, similarity-fallback engine",
    add_completion=False,
)

console = Console()


class SubmissionFile(BaseModel):
    """Layout of a submission JSON file."""

    questions: list[QuestionSubmission]


@app.command()
def grade(
    question: Annotated[str, typer.Option("--question", "-q", help="The question text")],
    expected: Annotated[str, typer.Option("--expected", "-e", help="The expected answer")],
    answer: Annotated[str, typer.Option("--answer", "-a", help="The student's answer")],
    marks: Annotated[int, typer.Option("--marks", "-m", help="Marks allocated")] = 10,
    no_ai: Annotated[
        bool,
        typer.Option("--no-ai", help="Skip the model and use similarity grading only"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed output"),
    ] = False,
) -> None:
    """
    Grade a single student answer against the expected answer.
    """
    _configure_logging(verbose)
    engine = GradingEngine.from_settings(_load_settings(no_ai))

    result = engine.grade_answer(question, expected, answer, marks)
    _display_result(result, marks)


@app.command()
def grade_submission(
    submission_file: Annotated[Path, typer.Argument(help="Path to the submission JSON file")],
    no_ai: Annotated[
        bool,
        typer.Option("--no-ai", help="Skip the model and use similarity grading only"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed output"),
    ] = False,
) -> None:
    """
    Grade every question of an exam submission.

    The file holds {"questions": [...]} where each entry has question_id,
    question, expected_answer, student_answer and total_marks.
    """
    _configure_logging(verbose)

    if not submission_file.exists():
        console.print(f"[red]Error:[/red] Submission file not found: {submission_file}")
        raise typer.Exit(1)

    try:
        submission = SubmissionFile.model_validate_json(
            submission_file.read_text(encoding="utf-8")
        )
    except ValidationError as e:
        console.print(f"[red]Submission Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    settings = _load_settings(no_ai)
    grader = SubmissionGrader(
        GradingEngine.from_settings(settings),
        max_workers=settings.batch_max_workers,
    )
    result = grader.grade_submission(submission.questions)
    _display_submission(result)


@app.command()
def battery(
    no_ai: Annotated[
        bool,
        typer.Option("--no-ai", help="Skip the model and use similarity grading only"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed output"),
    ] = False,
) -> None:
    """
    Run the calibration battery against the configured engine.

    Exits with status 1 when any case falls outside its accepted range.
    """
    _configure_logging(verbose)
    engine = GradingEngine.from_settings(_load_settings(no_ai))

    report = run_battery(engine)
    _display_battery(report)

    if report.failed:
        raise typer.Exit(1)


@app.command()
def health() -> None:
    """
    Check if the grading system is operational.

    Verifies configuration and, when AI grading is enabled, API connectivity.
    """
    settings = _load_settings(no_ai=False)
    console.print("[bold]Answer Grader Health Check[/bold]\n")

    console.print("[dim]Checking configuration...[/dim]")
    console.print(f"  AI Grading: {'enabled' if settings.ai_grading_enabled else 'disabled'}")
    console.print(f"  Fallback: {'enabled' if settings.ai_grading_fallback_enabled else 'disabled'}")
    console.print(f"  Timeout: {settings.ai_grading_timeout_ms}ms")

    if not settings.ai_grading_enabled:
        console.print("\n[green]Similarity grading operational (AI grading disabled)[/green]")
        return

    console.print(f"  API Base URL: {settings.llm_base_url}")
    console.print(f"  Model: {settings.llm_model}")

    console.print("\n[dim]Checking API connectivity...[/dim]")
    if LLMClient(settings).health_check():
        console.print("[green]✓ API is reachable[/green]")
    else:
        console.print("[red]✗ API is not reachable[/red]")
        raise typer.Exit(1)

    console.print("\n[green]All systems operational[/green]")


def _load_settings(no_ai: bool) -> Settings:
    """Load settings, turning configuration errors into a clean exit."""
    try:
        if no_ai:
            return Settings(ai_grading_enabled=False)
        return get_settings()
    except ValidationError as e:
        console.print(f"[red]Configuration Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _score_color(percent: float) -> str:
    return "green" if percent >= 70 else "yellow" if percent >= 50 else "red"


def _display_result(result: GradingResult, total_marks: int) -> None:
    """Display a single grading result."""
    color = _score_color(result.accuracy_percent)
    verdict = "Correct" if result.is_correct else "Incorrect"
    console.print(
        Panel(
            f"[{color}][bold]{result.marks_earned} / {total_marks}[/bold] "
            f"({result.accuracy_percent}% accuracy)[/{color}]\n"
            f"{verdict} via {result.grading_method.value} grading",
            title="Result",
        )
    )
    console.print(Panel(escape(result.feedback), title="Feedback"))


def _display_submission(result: SubmissionResult) -> None:
    """Display per-question results and the aggregate score."""
    table = Table(title="Questions")
    table.add_column("Question", style="cyan")
    table.add_column("Marks", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Method")
    table.add_column("Feedback")

    for qr in result.question_results:
        status = "✅" if qr.is_correct else "⚠️"
        table.add_row(
            f"{status} {qr.question_id}",
            f"{qr.marks_obtained}/{qr.total_marks}",
            f"{qr.accuracy_percent}%",
            qr.grading_method.value,
            escape(qr.feedback[:60]),
        )

    console.print(table)

    color = _score_color(result.score_percent)
    console.print(
        Panel(
            f"[{color}][bold]{result.obtained_marks} / {result.total_marks}[/bold] "
            f"({result.score_percent}%)[/{color}]\n"
            f"Grade: {result.letter_grade} ({result.status})\n"
            f"Correct: {result.correct_answers}  Wrong: {result.wrong_answers}  "
            f"Unanswered: {result.unanswered}",
            title="Final Score",
        )
    )


def _display_battery(report: BatteryReport) -> None:
    """Display battery outcomes in a table."""
    table = Table(title="Grading Battery")
    table.add_column("Case", style="cyan")
    table.add_column("Marks", justify="right")
    table.add_column("Expected", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Status")

    for r in report.results:
        table.add_row(
            r.case.name,
            f"{r.marks_earned}/{r.case.total_marks}",
            f"{r.case.min_marks}-{r.case.max_marks}",
            f"{r.accuracy_percent}%",
            "✅" if r.passed else "❌",
        )

    console.print(table)
    console.print(
        f"\n[bold]Passed:[/bold] {report.passed}/{report.total} "
        f"({report.success_rate:.1f}%)"
    )


if __name__ == "__main__":
    app()
