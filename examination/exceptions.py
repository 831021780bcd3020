"""
Exam Session Custom Exceptions

This module provides the exception classes raised by the exam session
services. Every exception carries an HTTP status code and a stable error
code so that the REST layer can render it directly and the proctoring
client can map an error response back to the same class.

The hierarchy mirrors the two rejection categories of the session:

- Guard violations: the operation is not allowed in the current state
  of the attempt (already started, session closed, ...).
- Data integrity errors: the request references data that does not belong
  to the attempt or is malformed.

Losing a concurrent submit race is not an exception. It is reported as a
successful no-op result by the state machine.

Author: Exam Platform Development Team
Version: 1.0.0
"""

from typing import Optional, Dict, Any, Type


class ExamSessionException(Exception):
    """
    Base exception class for all exam session errors.

    Attributes:
        message (str): Human-readable error message
        status_code (Optional[int]): HTTP status code used by the API layer
        error_code (Optional[str]): Stable machine-readable error identifier
        details (Optional[Dict[str, Any]]): Additional error details

    Example:
        >>> try:
        ...     state_machine.start(assignment)
        ... except ExamSessionException as e:
        ...     return Response(e.to_dict(), status=e.status_code)
    """

    default_message = "Exam session error"
    default_status_code = 400
    default_error_code = "ExamSessionError"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message or self.default_message
        self.status_code = status_code or self.default_status_code
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            'message': self.message,
            'status_code': self.status_code,
            'error_code': self.error_code,
            'details': self.details,
            'exception_type': self.__class__.__name__
        }


# --- Guard violations ---

class GuardViolation(ExamSessionException):
    """The requested transition is not allowed in the current state."""

    default_message = "Operation not allowed in the current session state"
    default_status_code = 409
    default_error_code = "GuardViolation"


class AlreadyStarted(GuardViolation):
    default_message = "The exam has already been started"
    default_error_code = "AlreadyStarted"


class ExamNotActive(GuardViolation):
    default_message = "The exam is not active or outside of its time window"
    default_status_code = 403
    default_error_code = "ExamNotActive"


class SessionClosed(GuardViolation):
    default_message = "The exam session is closed"
    default_error_code = "SessionClosed"


class SessionNotStarted(GuardViolation):
    default_message = "The exam session has not been started"
    default_error_code = "SessionNotStarted"


class NotSubmitted(GuardViolation):
    default_message = "The exam has not been submitted yet"
    default_error_code = "NotSubmitted"


class ScoreExceedsMax(GuardViolation):
    """Raised when a manual score is larger than the question's points."""

    default_message = "The score exceeds the maximum points of the question"
    default_status_code = 400
    default_error_code = "ScoreExceedsMax"

    def __init__(
        self,
        message: Optional[str] = None,
        max_points: Optional[int] = None
    ) -> None:
        details = {}
        if max_points is not None:
            details['max_points'] = max_points
        super().__init__(message=message, details=details)


class InvalidScore(GuardViolation):
    default_message = "The score must be a non-negative number"
    default_status_code = 400
    default_error_code = "InvalidScore"


class UnassignNotAllowed(GuardViolation):
    default_message = "An assignment can only be removed before the exam was started"
    default_error_code = "UnassignNotAllowed"


class NotAssigned(GuardViolation):
    default_message = "The exam is not assigned to this student"
    default_status_code = 403
    default_error_code = "NotAssigned"


# --- Data integrity errors ---

class DataIntegrityError(ExamSessionException):
    """The request references data that does not belong to the attempt."""

    default_message = "Invalid data for this exam session"
    default_status_code = 400
    default_error_code = "DataIntegrityError"


class QuestionNotInExam(DataIntegrityError):
    default_message = "The question does not belong to this exam"
    default_error_code = "QuestionNotInExam"

    def __init__(
        self,
        message: Optional[str] = None,
        question_id: Optional[int] = None
    ) -> None:
        details = {'question_id': question_id} if question_id is not None else {}
        super().__init__(message=message, details=details)


class ChoiceNotInQuestion(DataIntegrityError):
    default_message = "The choice does not belong to this question"
    default_error_code = "ChoiceNotInQuestion"

    def __init__(
        self,
        message: Optional[str] = None,
        choice_ids: Optional[list] = None
    ) -> None:
        details = {'choice_ids': list(choice_ids)} if choice_ids else {}
        super().__init__(message=message, details=details)


class InvalidAnswerPayload(DataIntegrityError):
    default_message = "The answer payload does not match the question type"
    default_error_code = "InvalidAnswerPayload"


class NotManuallyGradable(DataIntegrityError):
    default_message = "Only text questions can be graded manually"
    default_error_code = "NotManuallyGradable"


class UnknownViolationKind(DataIntegrityError):
    default_message = "Unknown security violation type"
    default_error_code = "UnknownViolationKind"


# --- Client side ---

class ProctoringTransportError(ExamSessionException):
    """
    Raised by the proctoring client when the server could not be reached.

    The session monitor treats this as a transient failure: a critical
    violation still locks the session locally.
    """

    default_message = "The exam server could not be reached"
    default_status_code = 503
    default_error_code = "TransportError"


# Exception mapping for error-code based exception creation
EXCEPTION_MAPPING: Dict[str, Type[ExamSessionException]] = {
    cls.default_error_code: cls
    for cls in (
        AlreadyStarted,
        ExamNotActive,
        SessionClosed,
        SessionNotStarted,
        NotSubmitted,
        ScoreExceedsMax,
        InvalidScore,
        UnassignNotAllowed,
        NotAssigned,
        QuestionNotInExam,
        ChoiceNotInQuestion,
        InvalidAnswerPayload,
        NotManuallyGradable,
        UnknownViolationKind,
        ProctoringTransportError,
    )
}

# Fallback when the response carries no known error code
STATUS_MAPPING: Dict[int, Type[ExamSessionException]] = {
    400: DataIntegrityError,
    403: GuardViolation,
    409: GuardViolation,
    503: ProctoringTransportError,
}


def create_exception_from_response(
    status_code: int,
    message: Optional[str] = None,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> ExamSessionException:
    """
    Factory function to create the matching exception for an error response.

    Args:
        status_code: HTTP status code from the response
        message: Error message from the response body
        error_code: Error code from the response body
        details: Additional details from the response body

    Returns:
        Appropriate exception instance

    Example:
        >>> exception = create_exception_from_response(409, error_code="SessionClosed")
        >>> isinstance(exception, SessionClosed)
        True
    """
    exception_class = EXCEPTION_MAPPING.get(error_code) or STATUS_MAPPING.get(
        status_code, ExamSessionException
    )
    exception = ExamSessionException.__new__(exception_class)
    ExamSessionException.__init__(
        exception,
        message=message,
        status_code=status_code,
        error_code=error_code or exception_class.default_error_code,
        details=details,
    )
    return exception
