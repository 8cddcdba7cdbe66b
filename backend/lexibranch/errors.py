from __future__ import annotations


class LexibranchError(Exception):
    """Base class for errors raised by the branching core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(LexibranchError):
    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource


class ForbiddenError(LexibranchError):
    def __init__(self, message: str = "Not a member of this project") -> None:
        super().__init__(message)


class ValidationError(LexibranchError):
    pass


class FieldValidationError(ValidationError):
    """
    Validation failure tied to a single input field, so a client can attach
    the message to that field. Raised the same way whether the problem was
    found by a pre-check or by a unique constraint at insert time.
    """

    def __init__(self, *, field: str, code: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.code = code

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code, "message": self.message}
