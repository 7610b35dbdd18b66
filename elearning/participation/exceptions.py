"""
Quiz Engine Exceptions

Exception hierarchy for quiz submission and scoring. Every exception
carries an HTTP status code and a machine readable error code so views
can turn it into a response with ``to_dict()``.

Hierarchy:
- QuizEngineError
  - ValidationError
    - InvalidQuestionReference
    - QuizNotFound
  - AlreadyAttempted
  - XpCalculationError
  - PersistenceError
  - SubmissionFailed

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Any, Dict, Optional


class QuizEngineError(Exception):
    """
    Base exception for all quiz engine errors.

    Attributes:
        message (str): Human-readable error message
        error_code (str): Stable error identifier for API clients
        status_code (int): HTTP status code used by the views
        details (Dict[str, Any]): Additional error context
    """

    default_message = "Quiz engine error."
    default_error_code = "QUIZ_ENGINE_ERROR"
    default_status_code = 500

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code
        self.status_code = status_code or self.default_status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "message": self.message,
            "error_code": self.error_code,
            "status_code": self.status_code,
            "details": self.details,
            "exception_type": self.__class__.__name__,
        }


class ValidationError(QuizEngineError):
    """Malformed submission: wrong answer shape, empty answer list, bad ids."""

    default_message = "The submission is invalid."
    default_error_code = "VALIDATION_ERROR"
    default_status_code = 400


class InvalidQuestionReference(ValidationError):
    """A submitted answer references a question that does not belong to the quiz."""

    default_message = "The submission references a question that is not part of this quiz."
    default_error_code = "INVALID_QUESTION_REFERENCE"

    def __init__(self, question_id: Any, quiz_id: Any) -> None:
        super().__init__(
            message=f"Question {question_id} is not part of quiz {quiz_id}.",
            details={"question_id": question_id, "quiz_id": quiz_id},
        )


class QuizNotFound(ValidationError):
    default_message = "Quiz not found."
    default_error_code = "QUIZ_NOT_FOUND"
    default_status_code = 404

    def __init__(self, quiz_id: Any) -> None:
        super().__init__(message=f"Quiz {quiz_id} not found.", details={"quiz_id": quiz_id})


class AlreadyAttempted(QuizEngineError):
    """
    Raised when a user submits a quiz they already have a participation for.

    Kept distinct from SubmissionFailed so clients can show a specific message.
    """

    default_message = "You have already taken this quiz."
    default_error_code = "ALREADY_ATTEMPTED"
    default_status_code = 409


class XpCalculationError(QuizEngineError):
    default_message = "Cannot calculate XP for a submission without questions."
    default_error_code = "XP_CALCULATION_ERROR"
    default_status_code = 400


class PersistenceError(QuizEngineError):
    """Datastore failure while writing a submission."""

    default_message = "Failed to persist the quiz submission."
    default_error_code = "PERSISTENCE_ERROR"


class SubmissionFailed(QuizEngineError):
    """Generic failure surfaced to learners for any error other than AlreadyAttempted."""

    default_message = "An error occurred while submitting your quiz. Please try again."
    default_error_code = "SUBMISSION_FAILED"
    default_status_code = 500
