"""
Base Converter Classes
======================

Abstract base class for converters. Extend it to migrate documents from
one schema generation to the next.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
import logging

from wixconvert_core.xml.nodes import Document
from wixconvert_core.xml.results import FailureKind

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """
    Container for the outcome of converting one file.

    Attributes:
        source: File that was converted
        error_count: Violations counted (ignored test types excluded)
        document: Converted document (None when loading failed)
        saved: Whether the converted document was written back
        failure: Load or save failure, if any
        detail: Failure detail
    """
    source: str
    error_count: int = 0
    document: Optional[Document] = None
    saved: bool = False
    failure: Optional[FailureKind] = None
    detail: str = ""

    @property
    def has_violations(self) -> bool:
        return self.error_count > 0

    def summary(self) -> str:
        """Generate a one-line summary of the conversion."""
        text = f"{self.source}: {self.error_count} violation(s)"
        if self.saved:
            text += ", saved"
        if self.failure is not None:
            text += f", {self.failure.value}: {self.detail}"
        return text


class BaseConverter(ABC):
    """
    Abstract base class for converters.

    Example:
        class MyConverter(BaseConverter):
            def convert_document(self, document: Document) -> int:
                errors = 0
                # ... inspect and rewrite the tree ...
                return errors

            def convert(self, path, save_converted=False) -> ConversionResult:
                ...
    """

    @abstractmethod
    def convert_document(self, document: Document) -> int:
        """
        Convert a document in place.

        Args:
            document: Parsed document

        Returns:
            Number of violations found
        """
        pass

    @abstractmethod
    def convert(self, source_file: Union[str, Path], save_converted: bool = False) -> ConversionResult:
        """
        Convert a file.

        Args:
            source_file: The file to convert
            save_converted: Write the converted document back when
                violations were found

        Returns:
            ConversionResult with the conversion outcome
        """
        pass

    def convert_file(self, source_file: Union[str, Path], save_converted: bool = False) -> int:
        """
        Convert a file and return the number of violations found.
        """
        return self.convert(source_file, save_converted).error_count
