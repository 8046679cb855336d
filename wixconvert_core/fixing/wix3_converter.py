"""
WiX v3 Converter
================

Converts WiX v3 source documents to the v4 schema and enforces canonical
indentation:

1. XML declaration present and declared as utf-8
2. Whitespace between elements matches the nesting depth
3. Deprecated namespaces moved to their v4 replacements
4. Element specific attribute migrations (see ``_handlers``)

Every change goes through ``ErrorReporter.report`` first; an ignored test
type leaves the tree untouched.
"""

from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Union
import logging
import ntpath

from wixconvert_core.fixing.base import BaseConverter, ConversionResult
from wixconvert_core.fixing.identifiers import get_identifier_from_name, lowercase_first_char
from wixconvert_core.fixing.namespaces import (
    OLD_TO_NEW_NAMESPACES,
    WIX_NAMESPACE,
    WIX_UTIL_NAMESPACE,
    update_deprecated_namespaces,
)
from wixconvert_core.fixing.whitespace import NEWLINE, fixup_whitespace, leading_whitespace_valid
from wixconvert_core.reporting.messaging import Messaging
from wixconvert_core.reporting.reporter import ErrorReporter
from wixconvert_core.reporting.types import ConverterTestType
from wixconvert_core.xml.nodes import (
    XMLNS_ATTRIBUTE,
    CData,
    Container,
    Document,
    Element,
    Node,
    QName,
    Text,
    XmlDeclaration,
)
from wixconvert_core.xml.reader import load_document
from wixconvert_core.xml.results import FailureKind
from wixconvert_core.xml.utils import get_element_path, is_whitespace
from wixconvert_core.xml.writer import save_document

logger = logging.getLogger(__name__)

COLUMN = QName(WIX_NAMESPACE, "Column")
CREATE_FOLDER = QName(WIX_NAMESPACE, "CreateFolder")
CUSTOM_TABLE = QName(WIX_NAMESPACE, "CustomTable")
DIRECTORY = QName(WIX_NAMESPACE, "Directory")
FILE = QName(WIX_NAMESPACE, "File")
EXE_PACKAGE = QName(WIX_NAMESPACE, "ExePackage")
MSI_PACKAGE = QName(WIX_NAMESPACE, "MsiPackage")
MSP_PACKAGE = QName(WIX_NAMESPACE, "MspPackage")
MSU_PACKAGE = QName(WIX_NAMESPACE, "MsuPackage")
PAYLOAD = QName(WIX_NAMESPACE, "Payload")
UTIL_PERMISSION_EX = QName(WIX_UTIL_NAMESPACE, "PermissionEx")
CUSTOM_ACTION = QName(WIX_NAMESPACE, "CustomAction")
PROPERTY = QName(WIX_NAMESPACE, "Property")
WIX_WITHOUT_NAMESPACE = QName("", "Wix")
INCLUDE_WITHOUT_NAMESPACE = QName("", "Include")

WHITESPACE_NODE_MESSAGE = "The whitespace preceding this node is incorrect."
WHITESPACE_END_ELEMENT_MESSAGE = "The whitespace preceding this end element is incorrect."


class Wix3Converter(BaseConverter):
    """
    WiX source code converter.

    One instance converts one document at a time; the error count and
    source are reset at the start of every conversion, so an instance can
    be reused sequentially but not shared between threads.

    Example:
        collector = MessageCollector()
        converter = Wix3Converter(collector, indentation_amount=4,
                                  ignore_errors=["WhitespacePrecedingNodeWrong"])
        errors = converter.convert_file(Path("Product.wxs"), save_converted=True)
    """

    def __init__(self, messaging: Optional[Messaging] = None,
                 indentation_amount: int = 4,
                 errors_as_warnings: Optional[Iterable[str]] = None,
                 ignore_errors: Optional[Iterable[str]] = None):
        """
        Initialize the converter.

        Args:
            messaging: Sink for reported violations (logs when omitted)
            indentation_amount: Spaces per nesting level
            errors_as_warnings: Test type names to report as warnings
            ignore_errors: Test type names to ignore entirely

        Raises:
            ValueError: If indentation_amount is negative
        """
        if indentation_amount < 0:
            raise ValueError(f"indentation_amount must not be negative: {indentation_amount}")

        self._handlers: Dict[QName, Callable[[Element], None]] = {
            COLUMN: self._convert_column_element,
            CUSTOM_TABLE: self._convert_custom_table_element,
            DIRECTORY: self._convert_directory_element,
            FILE: self._convert_file_element,
            EXE_PACKAGE: self._convert_suppress_signature_validation,
            MSI_PACKAGE: self._convert_suppress_signature_validation,
            MSP_PACKAGE: self._convert_suppress_signature_validation,
            MSU_PACKAGE: self._convert_suppress_signature_validation,
            PAYLOAD: self._convert_suppress_signature_validation,
            CUSTOM_ACTION: self._convert_custom_action_element,
            UTIL_PERMISSION_EX: self._convert_util_permission_ex_element,
            PROPERTY: self._convert_property_element,
            WIX_WITHOUT_NAMESPACE: self._convert_element_without_namespace,
            INCLUDE_WITHOUT_NAMESPACE: self._convert_element_without_namespace,
        }

        self.indentation_amount = indentation_amount
        self.reporter = ErrorReporter(messaging)
        self.reporter.configure(errors_as_warnings, ignore_errors)

    @classmethod
    def from_config(cls, config, messaging: Optional[Messaging] = None) -> "Wix3Converter":
        """Create a converter from a ``ConverterConfig``."""
        return cls(messaging,
                   indentation_amount=config.indentation_amount,
                   errors_as_warnings=config.errors_as_warnings,
                   ignore_errors=config.ignore_errors)

    @property
    def error_count(self) -> int:
        return self.reporter.error_count

    @property
    def errors_as_warnings(self):
        return frozenset(self.reporter.errors_as_warnings)

    @property
    def ignore_errors(self):
        return frozenset(self.reporter.ignore_errors)

    def _report(self, test_type: ConverterTestType, node: Optional[Node], message: str, *args, **kwargs) -> bool:
        return self.reporter.report(test_type, node, message, *args, **kwargs)

    # ------------------------------------------------------------------
    # Files and documents
    # ------------------------------------------------------------------

    def convert(self, source_file: Union[str, Path], save_converted: bool = False) -> ConversionResult:
        """
        Convert a file.

        Args:
            source_file: The file to convert
            save_converted: Write the converted document back when
                violations were found

        Returns:
            ConversionResult; ``error_count`` is the number of violations
        """
        source = str(source_file)
        self.reporter.reset(source)
        result = ConversionResult(source=source)

        loaded = load_document(source_file)
        if not loaded.ok:
            result.failure = loaded.failure
            result.detail = loaded.detail
            if loaded.failure == FailureKind.MALFORMED_INPUT:
                self._report(ConverterTestType.XmlException, None,
                             "The xml is invalid.  Detail: '{0}'", loaded.detail, line=loaded.line)
            else:
                self._report(ConverterTestType.UnauthorizedAccessException, None,
                             "Could not read file.  Detail: '{0}'", loaded.detail)
            result.error_count = self.reporter.error_count
            return result

        result.document = loaded.document
        self._convert_document(loaded.document)

        # Fix errors if requested and necessary.
        if save_converted and self.reporter.error_count > 0:
            saved = save_document(loaded.document, source_file)
            result.saved = saved.saved
            if not saved.saved:
                result.failure = saved.failure
                result.detail = saved.detail
                logger.debug(f"Save of {source} failed: {saved.detail}")
                self._report(ConverterTestType.UnauthorizedAccessException, None, "Could not write to file.")

        result.error_count = self.reporter.error_count
        logger.info(result.summary())
        return result

    def convert_document(self, document: Document) -> int:
        """
        Convert a document in place.

        Args:
            document: The document to convert

        Returns:
            The number of errors found
        """
        self.reporter.reset(document.source)
        return self._convert_document(document)

    def _convert_document(self, document: Document) -> int:
        declaration = document.declaration

        if declaration is not None:
            if (declaration.encoding or "").lower() != "utf-8":
                if self._report(ConverterTestType.DeclarationEncodingWrong, document.root,
                                "The XML declaration encoding is not properly set to 'utf-8'."):
                    declaration.encoding = "utf-8"
        else:
            if self._report(ConverterTestType.DeclarationMissing, None,
                            "This file is missing an XML declaration on the first line."):
                document.declaration = XmlDeclaration("1.0", "utf-8")
                root = document.root
                index = document.children.index(root) if root is not None else len(document.children)
                document.insert(index, Text(NEWLINE))

        self._convert_nodes(document, 0)

        return self.reporter.error_count

    # ------------------------------------------------------------------
    # Tree walk
    # ------------------------------------------------------------------

    def _convert_nodes(self, container: Container, level: int) -> None:
        # Whitespace nodes may be removed while walking, so work on a copy.
        for node in list(container.children):
            if isinstance(node, Text):
                if not is_whitespace(node.value):
                    node.value = node.value.strip()
                elif isinstance(node, CData):
                    continue
                elif isinstance(node.next_sibling, CData):
                    # Has its own test type so it can be ignored apart from element indentation.
                    self._ensure_preceding_whitespace_removed(
                        node, node, ConverterTestType.WhitespacePrecedingCDATAWrong)
                elif isinstance(node.next_sibling, Element):
                    self._ensure_preceding_whitespace_correct(
                        node, node, level, ConverterTestType.WhitespacePrecedingNodeWrong)
                elif node.next_sibling is None:
                    # Whitespace before the parent's end tag.
                    previous = node.previous_sibling
                    if previous is None or isinstance(previous, CData):
                        self._ensure_preceding_whitespace_removed(
                            node, node.parent, ConverterTestType.WhitespacePrecedingEndElementWrong)
                    else:
                        self._ensure_preceding_whitespace_correct(
                            node, node, max(level - 1, 0), ConverterTestType.WhitespacePrecedingEndElementWrong)
            elif isinstance(node, Element):
                self._convert_element(node)

                self._convert_nodes(node, level + 1)

    def _ensure_preceding_whitespace_correct(self, whitespace: Text, node: Node, level: int,
                                             test_type: ConverterTestType) -> None:
        if not leading_whitespace_valid(self.indentation_amount, level, whitespace.value):
            message = (WHITESPACE_END_ELEMENT_MESSAGE
                       if test_type == ConverterTestType.WhitespacePrecedingEndElementWrong
                       else WHITESPACE_NODE_MESSAGE)

            if self._report(test_type, node, message):
                whitespace.value = fixup_whitespace(self.indentation_amount, level, whitespace.value)

    def _ensure_preceding_whitespace_removed(self, whitespace: Text, node: Optional[Node],
                                             test_type: ConverterTestType) -> None:
        if whitespace.value:
            message = (WHITESPACE_END_ELEMENT_MESSAGE
                       if test_type == ConverterTestType.WhitespacePrecedingEndElementWrong
                       else WHITESPACE_NODE_MESSAGE)

            if self._report(test_type, node, message):
                whitespace.detach()

    def _convert_element(self, element: Element) -> None:
        # Gather any deprecated namespaces, then update this element tree based on those deprecations.
        deprecated_to_updated: Dict[str, str] = {}

        for name in element.namespace_declarations():
            value = element.attributes[name]
            updated = OLD_TO_NEW_NAMESPACES.get(value)
            if updated is not None:
                if self._report(ConverterTestType.XmlnsValueWrong, element,
                                "The namespace '{0}' is out of date.  It must be '{1}'.", value, updated):
                    deprecated_to_updated[value] = updated

        if deprecated_to_updated:
            update_deprecated_namespaces(element.iter(), deprecated_to_updated)

        # Apply any specialized conversion actions.
        convert = self._handlers.get(element.name)
        if convert is not None:
            logger.debug(f"Converting {get_element_path(element)}")
            convert(element)

    # ------------------------------------------------------------------
    # Element handlers
    # ------------------------------------------------------------------

    def _convert_column_element(self, element: Element) -> None:
        category = element.get("Category")
        if category is not None:
            camel_case_value = lowercase_first_char(category)
            if category != camel_case_value and self._report(
                    ConverterTestType.ColumnCategoryCamelCase, element,
                    "The CustomTable Category attribute contains an incorrectly cased '{0}' value. "
                    "Lowercase the first character instead.", "Category"):
                element.set("Category", camel_case_value)

        modularization = element.get("Modularize")
        if modularization is not None:
            camel_case_value = lowercase_first_char(modularization)
            if modularization != camel_case_value and self._report(
                    ConverterTestType.ColumnModularizeCamelCase, element,
                    "The CustomTable Modularize attribute contains an incorrectly cased '{0}' value. "
                    "Lowercase the first character instead.", "Modularize"):
                element.set("Modularize", camel_case_value)

    def _convert_custom_table_element(self, element: Element) -> None:
        bootstrapper_application_data = element.get("BootstrapperApplicationData")
        if bootstrapper_application_data is not None and self._report(
                ConverterTestType.BootstrapperApplicationDataDeprecated, element,
                "The CustomTable element contains deprecated '{0}' attribute. Use the 'Unreal' attribute instead.",
                "BootstrapperApplicationData"):
            element.set("Unreal", bootstrapper_application_data)
            element.remove_attribute("BootstrapperApplicationData")

    def _convert_directory_element(self, element: Element) -> None:
        if not element.has_attribute("Name"):
            short_name = element.get("ShortName")
            if short_name is not None:
                if self._report(ConverterTestType.AssignDirectoryNameFromShortName, element,
                                "The directory ShortName attribute is being renamed to Name since Name "
                                "wasn't specified for value '{0}'", short_name):
                    element.set("Name", short_name)
                    element.remove_attribute("ShortName")

    def _convert_file_element(self, element: Element) -> None:
        if element.has_attribute("Id"):
            return

        value = element.get("Name")
        if value is None:
            value = element.get("Source")

        if value is not None:
            # Source paths are Windows paths; either separator may appear.
            name = ntpath.basename(value)

            if self._report(ConverterTestType.AssignAnonymousFileId, element,
                            "The file id is being updated to '{0}' to ensure it remains the same as the default",
                            name):
                attributes = list(element.attributes.items())
                element.attributes.clear()
                element.set("Id", get_identifier_from_name(name))
                element.attributes.update(attributes)

    def _convert_suppress_signature_validation(self, element: Element) -> None:
        suppress_signature_validation = element.get("SuppressSignatureValidation")

        if suppress_signature_validation is not None:
            if self._report(ConverterTestType.SuppressSignatureValidationDeprecated, element,
                            "The chain package element contains deprecated '{0}' attribute. "
                            "Use the 'EnableSignatureValidation' attribute instead.",
                            "SuppressSignatureValidation"):
                if suppress_signature_validation == "no":
                    element.set("EnableSignatureValidation", "yes")

                element.remove_attribute("SuppressSignatureValidation")

    def _convert_custom_action_element(self, element: Element) -> None:
        binary_key = element.get("BinaryKey")

        if binary_key in ("WixCA", "UtilCA"):
            if self._report(ConverterTestType.WixCABinaryIdRenamed, element,
                            "The WixCA custom action DLL Binary table id has been renamed. "
                            "Use the id 'Wix4UtilCA_X86' instead."):
                element.set("BinaryKey", "Wix4UtilCA_X86")

        binary_key = element.get("BinaryKey")

        if binary_key in ("WixCA_x64", "UtilCA_x64"):
            if self._report(ConverterTestType.WixCABinaryIdRenamed, element,
                            "The WixCA_x64 custom action DLL Binary table id has been renamed. "
                            "Use the id 'Wix4UtilCA_X64' instead."):
                element.set("BinaryKey", "Wix4UtilCA_X64")

        dll_entry = element.get("DllEntry")

        if dll_entry in ("CAQuietExec", "CAQuietExec64"):
            if self._report(ConverterTestType.QuietExecCustomActionsRenamed, element,
                            "The CAQuietExec and CAQuietExec64 custom action ids have been renamed. "
                            "Use the ids 'WixQuietExec' and 'WixQuietExec64' instead."):
                element.set("DllEntry", dll_entry.replace("CAQuietExec", "WixQuietExec"))

        property_id = element.get("Property")

        if property_id in ("QtExecCmdLine", "QtExec64CmdLine"):
            if self._report(ConverterTestType.QuietExecCustomActionsRenamed, element,
                            "The QtExecCmdLine and QtExec64CmdLine property ids have been renamed. "
                            "Use the ids 'WixQuietExecCmdLine' and 'WixQuietExec64CmdLine' instead."):
                element.set("Property", property_id.replace("QtExec", "WixQuietExec"))

    def _convert_property_element(self, element: Element) -> None:
        if element.get("Id") == "QtExecCmdTimeout":
            self._report(ConverterTestType.QtExecCmdTimeoutAmbiguous, element,
                         "QtExecCmdTimeout was previously used for both CAQuietExec and CAQuietExec64. "
                         "For WixQuietExec, use WixQuietExecCmdTimeout. "
                         "For WixQuietExec64, use WixQuietExec64CmdTimeout.")

    def _convert_util_permission_ex_element(self, element: Element) -> None:
        if element.has_attribute("Inheritable"):
            return

        parent = element.parent
        inheritable = isinstance(parent, Element) and parent.name == CREATE_FOLDER
        if not inheritable:
            if self._report(ConverterTestType.AssignPermissionExInheritable, element,
                            "The PermissionEx Inheritable attribute is being set to 'no' "
                            "to ensure it remains the same as the v3 default"):
                element.set("Inheritable", "no")

    def _convert_element_without_namespace(self, element: Element) -> None:
        if self._report(ConverterTestType.XmlnsMissing, element,
                        "The xmlns attribute is missing.  It must be present with a value of '{0}'.",
                        WIX_NAMESPACE):
            element.set(XMLNS_ATTRIBUTE, WIX_NAMESPACE)

            for element_without_namespace in list(element.iter()):
                if not element_without_namespace.name.namespace:
                    element_without_namespace.name = QName(WIX_NAMESPACE, element_without_namespace.name.local)
