"""
Submitted answer types.

Raw answers arrive as strings, lists of strings or null. They are parsed
once at the boundary into one of three answer types selected by the
question's own type, so the evaluator never sees loosely-typed input.

Author: DSP Development Team
Version: 1.0.0
"""

import json
from dataclasses import dataclass
from typing import Any, Tuple, Union

from ..quizzes.models import QuestionType
from .exceptions import ValidationError


@dataclass(frozen=True)
class SingleChoiceAnswer:
    value: str

    @property
    def is_empty(self) -> bool:
        return self.value == ""

    def stored_value(self) -> str:
        return self.value.strip()


@dataclass(frozen=True)
class MultiChoiceAnswer:
    values: Tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return len(self.values) == 0

    def stored_value(self) -> str:
        # JSON array, as read back by the result views
        return json.dumps(list(self.values))


@dataclass(frozen=True)
class TextAnswer:
    value: str

    @property
    def is_empty(self) -> bool:
        return self.value == ""

    def stored_value(self) -> str:
        return self.value.strip()


SubmittedAnswer = Union[SingleChoiceAnswer, MultiChoiceAnswer, TextAnswer]


def parse_answer(question_type: str, raw: Any) -> SubmittedAnswer:
    """
    Build the typed answer for a question from a raw submitted value.

    A null value is accepted as "not answered" and yields an empty answer
    that always evaluates to incorrect. Checkbox questions accept a single
    string, which is treated as a one-element selection.

    Raises:
        ValidationError: if the value is neither a string, a list of strings
            nor null, or a list is sent for a single-value question.
    """
    if raw is not None and not isinstance(raw, (str, list)):
        raise ValidationError(
            "Answer must be a string or an array.",
            details={"received_type": type(raw).__name__},
        )

    if question_type == QuestionType.CHECKBOX:
        if raw is None:
            return MultiChoiceAnswer(values=())
        values = raw if isinstance(raw, list) else ([raw] if raw else [])
        if not all(isinstance(v, str) for v in values):
            raise ValidationError("Checkbox answers must be strings.")
        return MultiChoiceAnswer(values=tuple(values))

    if isinstance(raw, list):
        raise ValidationError(
            f"Question type '{question_type}' expects a single string answer.",
            details={"question_type": question_type},
        )

    value = raw or ""
    if question_type == QuestionType.IDENTIFICATION:
        return TextAnswer(value=value)
    # multiple_choice and anything unknown keep the raw string; unknown types
    # are scored incorrect by the evaluator.
    return SingleChoiceAnswer(value=value)


def display_answer(stored: str) -> str:
    """Human readable form of a stored answer (JSON arrays joined by commas)."""
    if stored and stored.startswith("["):
        try:
            values = json.loads(stored)
        except ValueError:
            return stored
        if isinstance(values, list):
            return ", ".join(str(v) for v in values)
    return stored
