"""
Diagnostic Messages
===================

Structured records emitted for every reported violation, and the sinks
that receive them.

Components:
- Message: one violation (code, level, text, source, line)
- Messaging: the sink interface
- LoggingMessaging: writes messages through ``logging``
- MessageCollector: keeps messages in memory with counts and a summary
- CompositeMessaging: forwards to several sinks
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
import logging

from wixconvert_core.reporting.types import ConverterTestType

logger = logging.getLogger(__name__)


class MessageLevel(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Message:
    """
    A single reported violation.

    Attributes:
        code: Numeric message code (the test type ordinal)
        level: Error or warning
        text: Formatted message, suffixed with the test type name
        source: Document being converted
        line: Source line number, when the violation is tied to a node
        test_type: The violated test type
    """
    code: int
    level: MessageLevel
    text: str
    source: str
    line: Optional[int] = None
    test_type: Optional[ConverterTestType] = None

    @property
    def is_warning(self) -> bool:
        return self.level == MessageLevel.WARNING

    @property
    def location(self) -> str:
        if self.line is None:
            return self.source
        return f"{self.source}({self.line})"

    def format(self) -> str:
        return f"{self.location} : {self.level.value} WXCV{self.code:04d} : {self.text}"

    def to_dict(self) -> Dict:
        return {
            'code': self.code,
            'level': self.level.value,
            'message': self.text,
            'file': self.source,
            'line': self.line,
            'type': self.test_type.name if self.test_type is not None else None,
        }


class Messaging(ABC):
    """Sink for diagnostic messages."""

    @abstractmethod
    def write(self, message: Message) -> None:
        """
        Receive one reported violation.

        Args:
            message: The formatted message
        """
        pass


class LoggingMessaging(Messaging):
    """Send messages to a logger, mapping levels to logging levels."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def write(self, message: Message) -> None:
        if message.is_warning:
            self._log.warning(message.format())
        else:
            self._log.error(message.format())


@dataclass
class MessageCollector(Messaging):
    """
    Keep every message in memory.

    Attributes:
        messages: Messages in the order they were written
        error_count: Messages written at error level
        warning_count: Messages written at warning level
    """
    messages: List[Message] = field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0

    def write(self, message: Message) -> None:
        self.messages.append(message)
        if message.is_warning:
            self.warning_count += 1
        else:
            self.error_count += 1

    def clear(self) -> None:
        self.messages.clear()
        self.error_count = 0
        self.warning_count = 0

    def of_type(self, test_type: ConverterTestType) -> List[Message]:
        return [m for m in self.messages if m.test_type == test_type]

    def get_messages_by_type(self) -> Dict[str, int]:
        """Get message counts by test type name."""
        by_type: Dict[str, int] = {}
        for message in self.messages:
            name = message.test_type.name if message.test_type is not None else str(message.code)
            by_type[name] = by_type.get(name, 0) + 1
        return by_type

    def get_messages_by_file(self) -> Dict[str, List[Message]]:
        """Group messages by source."""
        by_file: Dict[str, List[Message]] = {}
        for message in self.messages:
            by_file.setdefault(message.source, []).append(message)
        return by_file

    def summary(self) -> str:
        """Generate a text summary of collected messages."""
        if not self.messages:
            return "No violations found"

        lines = [
            f"{self.error_count} error(s), {self.warning_count} warning(s)",
            "",
            "Violations by type:",
        ]
        for name, count in sorted(self.get_messages_by_type().items(), key=lambda x: -x[1]):
            lines.append(f"  {name}: {count}")

        lines.extend(["", "Violations by file:"])
        for source, file_messages in sorted(self.get_messages_by_file().items()):
            lines.append(f"  {source}: {len(file_messages)}")

        return "\n".join(lines)


class CompositeMessaging(Messaging):
    """Forward every message to each of several sinks."""

    def __init__(self, *sinks: Messaging):
        self.sinks = list(sinks)

    def write(self, message: Message) -> None:
        for sink in self.sinks:
            sink.write(message)
