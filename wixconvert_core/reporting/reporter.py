"""
Error Reporter
==============

Classifies violations and decides whether the caller may fix them.

Every check in the converter follows the same protocol: detect a
violation, call ``report`` with its test type, and only change the tree
when ``report`` returns True.
"""

from typing import Iterable, List, Optional, Set, Tuple
import logging

from wixconvert_core.reporting.messaging import LoggingMessaging, Message, MessageLevel, Messaging
from wixconvert_core.reporting.types import ConverterTestType

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "wixconvert"


class ErrorReporter:
    """
    Owns the per-document run state and the ignore/warning configuration.

    Attributes:
        source: Identifier of the document being converted
        error_count: Violations counted since the last ``reset``
        errors_as_warnings: Test types reported with warning severity
        ignore_errors: Test types that are neither counted nor fixed
    """

    def __init__(self, messaging: Optional[Messaging] = None,
                 errors_as_warnings: Iterable[ConverterTestType] = (),
                 ignore_errors: Iterable[ConverterTestType] = ()):
        self.messaging = messaging or LoggingMessaging()
        self.errors_as_warnings: Set[ConverterTestType] = set(errors_as_warnings)
        self.ignore_errors: Set[ConverterTestType] = set(ignore_errors)
        self.source: Optional[str] = None
        self.error_count = 0

    def reset(self, source: Optional[str] = None) -> None:
        """Start a new run for ``source``."""
        self.source = source
        self.error_count = 0

    def report(self, test_type: ConverterTestType, node, message: str, *args,
               line: Optional[int] = None) -> bool:
        """
        Report a violation.

        Args:
            test_type: The violated test type
            node: Node the violation is attached to, or None for
                document-level problems
            message: Message text with ``{0}``-style placeholders
            *args: Placeholder values
            line: Line to use when there is no node to take it from

        Returns:
            True when the caller may apply the fix, False when the test
            type is ignored
        """
        if test_type in self.ignore_errors:
            return False

        self.error_count += 1

        if node is not None:
            line = getattr(node, "line", None)
        source = self.source or DEFAULT_SOURCE
        level = MessageLevel.WARNING if test_type in self.errors_as_warnings else MessageLevel.ERROR
        display = message.format(*args) if args else message

        self.messaging.write(Message(
            code=int(test_type),
            level=level,
            text=f"{display} ({test_type.name})",
            source=source,
            line=line,
            test_type=test_type,
        ))

        return True

    def resolve_test_types(self, names: Optional[Iterable[str]]) -> List[ConverterTestType]:
        """
        Turn configured names into test types.

        Each unrecognized name is reported once as ``ConverterTestTypeUnknown``
        and skipped.
        """
        resolved: List[ConverterTestType] = []
        for name in names or ():
            test_type = ConverterTestType.lookup(name)
            if test_type is None:
                self.report(ConverterTestType.ConverterTestTypeUnknown, None,
                            "Unknown error type: '{0}'.", name)
            else:
                resolved.append(test_type)
        return resolved

    def configure(self, errors_as_warnings: Optional[Iterable[str]] = None,
                  ignore_errors: Optional[Iterable[str]] = None) -> Tuple[Set, Set]:
        """
        Resolve and install the warning and ignore sets from names.

        Both lists are resolved before either set is installed, so an
        unknown name is always reported at error severity.
        """
        warnings = set(self.resolve_test_types(errors_as_warnings))
        ignored = set(self.resolve_test_types(ignore_errors))
        self.errors_as_warnings = warnings
        self.ignore_errors = ignored
        if warnings or ignored:
            logger.debug(f"Warnings: {sorted(t.name for t in warnings)}; "
                         f"ignored: {sorted(t.name for t in ignored)}")
        return warnings, ignored
