"""
Load and Save Results
=====================

Containers describing the outcome of reading or writing a document.
Failures are returned as values so the converter can report them through
the normal diagnostic channel instead of unwinding.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from wixconvert_core.xml.nodes import Document


class FailureKind(Enum):
    """Why a document could not be read or written."""
    MALFORMED_INPUT = "malformed_input"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    IO_ERROR = "io_error"


@dataclass
class LoadResult:
    """
    Outcome of parsing a document.

    Attributes:
        document: Parsed document (None on failure)
        failure: Failure kind (None on success)
        detail: Human readable failure detail
        line: Line where parsing stopped, when known
    """
    document: Optional[Document] = None
    failure: Optional[FailureKind] = None
    detail: str = ""
    line: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.document is not None


@dataclass
class SaveResult:
    """Outcome of writing a document back to storage."""
    saved: bool = False
    failure: Optional[FailureKind] = None
    detail: str = ""
