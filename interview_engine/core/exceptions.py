"""Exceptions raised by the interview engine."""


class NotFoundError(LookupError):
    """Raised when a referenced record does not exist (or is soft-deleted)."""


class AssessmentNotFoundError(NotFoundError):
    """Raised when an assessment cannot be found."""


class QuestionnaireNotFoundError(NotFoundError):
    """Raised when a questionnaire cannot be found."""


class InterviewNotFoundError(NotFoundError):
    """Raised when an interview cannot be found."""


class ResponseNotFoundError(NotFoundError):
    """Raised when an interview response cannot be found."""


class QuestionNotFoundError(NotFoundError):
    """Raised when a questionnaire question cannot be found."""


class RoleLookupError(NotFoundError):
    """Raised when company roles cannot be resolved."""


class RoleNotApplicableError(ValueError):
    """Raised when a response is tagged with a role the question does not apply to."""


class InvalidScoringConfigurationError(ValueError):
    """Raised when part answers arrive for a question without usable part scoring."""


class InterviewCreationError(Exception):
    """Raised when an interview could not be created; partial writes are rolled back."""
