"""
Violation Reporting
===================

Test types, diagnostic messages and the reporter that gates every fix.
"""

from wixconvert_core.reporting.types import ConverterTestType
from wixconvert_core.reporting.messaging import (
    CompositeMessaging,
    LoggingMessaging,
    Message,
    MessageCollector,
    MessageLevel,
    Messaging,
)
from wixconvert_core.reporting.reporter import (
    DEFAULT_SOURCE,
    ErrorReporter,
)

__all__ = [
    "ConverterTestType",
    "CompositeMessaging",
    "LoggingMessaging",
    "Message",
    "MessageCollector",
    "MessageLevel",
    "Messaging",
    "DEFAULT_SOURCE",
    "ErrorReporter",
]
