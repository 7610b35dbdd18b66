"""
Answer Evaluator

Decides whether one submitted answer is correct for one question. Works
on question snapshots so it can be fed from the cache or straight from the
ORM, and never raises for well-formed input: missing correct choices or an
unknown question type simply evaluate to False.

Rules by question type:
- multiple_choice: trimmed, case-sensitive equality with the (first) correct choice
- checkbox: sorted trimmed selections equal the sorted trimmed correct set
- identification: case-insensitive trimmed membership in the accepted answers

Author: DSP Development Team
Version: 1.0.0
"""

import logging

from ..quizzes.models import QuestionSnapshot, QuestionType
from .answers import MultiChoiceAnswer, SubmittedAnswer

logger = logging.getLogger(__name__)


def evaluate(question: QuestionSnapshot, answer: SubmittedAnswer) -> bool:
    """
    Evaluate a submitted answer against a question.

    Args:
        question: Question snapshot including its choices
        answer: Parsed answer (see answers.parse_answer)

    Returns:
        True if the answer is fully correct, False otherwise
    """
    if answer is None or answer.is_empty:
        return False

    if question.question_type == QuestionType.MULTIPLE_CHOICE:
        return _evaluate_multiple_choice(question, answer)
    if question.question_type == QuestionType.CHECKBOX:
        return _evaluate_checkbox(question, answer)
    if question.question_type == QuestionType.IDENTIFICATION:
        return _evaluate_identification(question, answer)

    logger.warning(f"Unknown question type '{question.question_type}' for question {question.id}")
    return False


def _evaluate_multiple_choice(question: QuestionSnapshot, answer) -> bool:
    correct = next((c for c in question.choices if c.is_correct), None)
    if correct is None:
        logger.warning(f"No correct choice found for question {question.id}")
        return False
    if isinstance(answer, MultiChoiceAnswer):
        return False
    return correct.choice.strip() == answer.value.strip()


def _evaluate_checkbox(question: QuestionSnapshot, answer) -> bool:
    expected = sorted(c.choice.strip() for c in question.choices if c.is_correct)
    if not expected:
        logger.warning(f"No correct choices found for checkbox question {question.id}")
        return False
    values = answer.values if isinstance(answer, MultiChoiceAnswer) else (answer.value,)
    return sorted(v.strip() for v in values) == expected


def _evaluate_identification(question: QuestionSnapshot, answer) -> bool:
    accepted = {c.choice.strip().lower() for c in question.choices if c.is_correct}
    accepted.discard("")
    if not accepted:
        logger.warning(f"No correct answers found for identification question {question.id}")
        return False
    if isinstance(answer, MultiChoiceAnswer):
        return False
    return answer.value.strip().lower() in accepted
