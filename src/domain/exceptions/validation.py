"""Input validation exceptions."""

from dataclasses import dataclass
from typing import List

from .base import DomainException


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure."""

    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ValidationException(DomainException):
    """Raised when transaction input is malformed or incomplete."""

    def __init__(self, errors: List[FieldError]):
        super().__init__(
            message="; ".join(f"{e.field}: {e.message}" for e in errors),
            code="VALIDATION_ERROR",
        )
        self.errors = list(errors)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationException":
        return cls([FieldError(field=field, message=message)])
