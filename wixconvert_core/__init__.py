"""
wixconvert Core Library
=======================

Converts WiX v3 source documents to the v4 schema while enforcing a
canonical indentation style:

- XML node model that keeps whitespace, CDATA and line numbers
- Namespace migration from legacy schema URIs
- Table-driven per-element attribute migrations
- Configurable reporting: every violation can be ignored, downgraded to a
  warning, or fixed

Architecture
------------

    wixconvert_core/
    ├── xml/         - Node model, reader and writer
    ├── reporting/   - Test types, messages and the error reporter
    ├── fixing/      - Converter framework and the WiX v3 converter
    ├── config/      - Configuration management
    └── cli.py       - Command line entry point

Usage
-----

    from wixconvert_core import Wix3Converter, MessageCollector

    collector = MessageCollector()
    converter = Wix3Converter(collector, indentation_amount=4,
                              errors_as_warnings=["XmlnsValueWrong"])
    errors = converter.convert_file("Product.wxs", save_converted=True)
    print(collector.summary())

"""

__version__ = "1.0.0"

from wixconvert_core.xml import (
    Document,
    Element,
    QName,
    load_document,
    parse_document,
    save_document,
    serialize_document,
)

from wixconvert_core.reporting import (
    ConverterTestType,
    ErrorReporter,
    LoggingMessaging,
    Message,
    MessageCollector,
    MessageLevel,
    Messaging,
)

from wixconvert_core.fixing import (
    BaseConverter,
    ConversionResult,
    Wix3Converter,
    get_identifier_from_name,
)

from wixconvert_core.config import (
    ConverterConfig,
    load_config,
    save_config,
)

__all__ = [
    # Version
    "__version__",
    # XML
    "Document",
    "Element",
    "QName",
    "load_document",
    "parse_document",
    "save_document",
    "serialize_document",
    # Reporting
    "ConverterTestType",
    "ErrorReporter",
    "LoggingMessaging",
    "Message",
    "MessageCollector",
    "MessageLevel",
    "Messaging",
    # Conversion
    "BaseConverter",
    "ConversionResult",
    "Wix3Converter",
    "get_identifier_from_name",
    # Configuration
    "ConverterConfig",
    "load_config",
    "save_config",
]
