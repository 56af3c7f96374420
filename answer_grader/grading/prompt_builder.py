"""
Prompt builder for model-based grading.

Constructs the evaluator prompt that asks for:
- Marks earned within the question's allocation
- An accuracy percentage
- Short feedback and a correctness flag
- A single JSON object carrying all of the above
"""


class PromptBuilder:
    """
    Builds grading prompts for a generative evaluator.

    The reply may wrap the JSON object in prose; ResponseParser
    locates it wherever it appears.
    """

    SYSTEM_PROMPT = """You are an expert exam grader. You compare a student's answer with the expected answer and award marks fairly and consistently.

RULES:
1. Judge meaning, not wording. Accept synonyms and paraphrasing that preserve the key concepts.
2. Award partial credit for partially correct answers.
3. Never award more than the total marks for the question, and never less than zero.
4. Your reply MUST contain exactly one JSON object in the format requested."""

    @staticmethod
    def build_grading_prompt(
        question: str,
        expected_answer: str,
        student_answer: str,
        total_marks: int,
    ) -> str:
        """
        Build the user prompt for grading one answer.

        Args:
            question: The question put to the student.
            expected_answer: The reference answer.
            student_answer: The student's answer text.
            total_marks: Marks allocated to the question.

        Returns:
            The formatted user prompt.
        """
        prompt = f"""Grade the following student answer:

QUESTION: {question}
EXPECTED ANSWER: {expected_answer}
STUDENT ANSWER: {student_answer}
TOTAL MARKS: {total_marks}

Evaluate the student's answer and provide:
1. Marks earned (0 to {total_marks})
2. Percentage accuracy (0-100)
3. Brief feedback explaining the grading
4. Whether the answer is correct (true/false)

Consider:
- Semantic similarity (synonyms, paraphrasing)
- Partial credit for partially correct answers
- Key concepts covered
- Mathematical accuracy if applicable

Respond in JSON format:
{{
  "marksEarned": <number>,
  "accuracy": <number>,
  "feedback": "<string>",
  "isCorrect": <boolean>
}}"""

        return prompt

    @staticmethod
    def get_system_prompt() -> str:
        """Get the system prompt for the evaluator role."""
        return PromptBuilder.SYSTEM_PROMPT
