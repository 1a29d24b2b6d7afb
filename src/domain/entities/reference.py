"""Read-only views of companies, categories and clients."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class ReferenceKind(str, Enum):
    COMPANY = "company"
    CATEGORY = "category"
    CLIENT = "client"


@dataclass(frozen=True)
class Reference:
    """Identity and display name of a lookup row."""

    id: UUID
    name: str
