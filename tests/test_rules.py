"""
Element migration tests.

Run with: pytest tests/test_rules.py -v
"""

import pytest

from wixconvert_core.reporting import ConverterTestType, MessageLevel

from conftest import DECLARATION, wix

UTIL4 = "http://wixtoolset.org/schemas/v4/wxs/util"


def util_wix(body: str) -> str:
    return (f'{DECLARATION}<Wix xmlns="http://wixtoolset.org/schemas/v4/wxs" xmlns:util="{UTIL4}">\n'
            f'{body}\n</Wix>')


class TestColumn:
    """Tests for Column attribute casing."""

    def test_category_and_modularize_lowercased(self, convert, collector):
        """Both attributes get a lowercase first character."""
        errors, output = convert(wix('    <Column Id="c" Category="Text" Modularize="Column" />'))
        assert errors == 2
        assert [m.test_type for m in collector.messages] == [
            ConverterTestType.ColumnCategoryCamelCase,
            ConverterTestType.ColumnModularizeCamelCase,
        ]
        assert '<Column Id="c" Category="text" Modularize="column" />' in output

    def test_already_camel_case(self, convert):
        """Lowercase values are left alone."""
        errors, _ = convert(wix('    <Column Id="c" Category="text" Modularize="none" />'))
        assert errors == 0

    def test_modularize_checked_on_its_own(self, convert, collector):
        """A correctly cased Category does not hide a bad Modularize value."""
        errors, output = convert(wix('    <Column Id="c" Category="text" Modularize="None" />'))
        assert errors == 1
        assert collector.messages[0].test_type == ConverterTestType.ColumnModularizeCamelCase
        assert 'Modularize="none"' in output


class TestCustomTable:
    """Tests for CustomTable/@BootstrapperApplicationData."""

    def test_renamed_to_unreal(self, convert, collector):
        """The value moves to Unreal."""
        errors, output = convert(wix('    <CustomTable Id="t" BootstrapperApplicationData="yes" />'))
        assert errors == 1
        assert '<CustomTable Id="t" Unreal="yes" />' in output
        assert collector.messages[0].text == (
            "The CustomTable element contains deprecated 'BootstrapperApplicationData' attribute. "
            "Use the 'Unreal' attribute instead. (BootstrapperApplicationDataDeprecated)")


class TestDirectory:
    """Tests for Directory/@ShortName."""

    def test_short_name_becomes_name(self, convert, collector):
        """Without Name, ShortName is renamed."""
        errors, output = convert(wix('    <Directory ShortName="x" />'))
        assert errors == 1
        assert '<Directory Name="x" />' in output
        assert collector.messages[0].line == 3

    def test_ignored_short_name(self, convert, collector):
        """An ignored rename is neither counted nor applied."""
        xml = wix('    <Directory ShortName="x" />')
        errors, output = convert(xml, ignore_errors=["AssignDirectoryNameFromShortName"])
        assert errors == 0
        assert output == xml
        assert collector.messages == []

    def test_short_name_as_warning(self, convert, collector):
        """A downgraded rename is still applied, at warning severity."""
        errors, output = convert(wix('    <Directory ShortName="x" />'),
                                 errors_as_warnings=["AssignDirectoryNameFromShortName"])
        assert errors == 1
        assert '<Directory Name="x" />' in output
        assert collector.messages[0].level == MessageLevel.WARNING
        assert collector.messages[0].test_type == ConverterTestType.AssignDirectoryNameFromShortName

    def test_name_present(self, convert):
        """ShortName stays when Name is already set."""
        xml = wix('    <Directory Name="Program Files" ShortName="PFiles" />')
        errors, output = convert(xml)
        assert errors == 0
        assert output == xml


class TestFile:
    """Tests for anonymous File ids."""

    def test_id_from_source(self, convert, collector):
        """The file name part of Source becomes the Id, placed first."""
        errors, output = convert(wix('    <File Source="bin\\a.exe" />'))
        assert errors == 1
        assert '<File Id="a.exe" Source="bin\\a.exe" />' in output
        assert collector.messages[0].test_type == ConverterTestType.AssignAnonymousFileId

    def test_forward_slashes(self, convert):
        """Either path separator is understood."""
        _, output = convert(wix('    <File Source="bin/sub/b.dll" />'))
        assert '<File Id="b.dll" Source="bin/sub/b.dll" />' in output

    def test_name_wins_over_source(self, convert, collector):
        """Name is preferred and sanitized into an identifier."""
        errors, output = convert(wix('    <File Name="My App.exe" Source="bin\\app.exe" />'))
        assert errors == 1
        assert '<File Id="My_App.exe" Name="My App.exe" Source="bin\\app.exe" />' in output
        assert "'My App.exe'" in collector.messages[0].text

    def test_existing_id(self, convert):
        """Files with an Id are not touched."""
        xml = wix('    <File Id="f" Source="a.exe" />')
        errors, output = convert(xml)
        assert errors == 0
        assert output == xml

    def test_no_name_or_source(self, convert):
        """Nothing to derive from means nothing to report."""
        errors, _ = convert(wix('    <File KeyPath="yes" />'))
        assert errors == 0


class TestSuppressSignatureValidation:
    """Tests for chain package signature validation."""

    @pytest.mark.parametrize("element", ["ExePackage", "MsiPackage", "MspPackage", "MsuPackage", "Payload"])
    def test_no_becomes_enable(self, convert, element):
        """SuppressSignatureValidation="no" turns into EnableSignatureValidation="yes"."""
        errors, output = convert(wix(f'    <{element} SourceFile="a" SuppressSignatureValidation="no" />'))
        assert errors == 1
        assert f'<{element} SourceFile="a" EnableSignatureValidation="yes" />' in output

    def test_yes_is_dropped(self, convert):
        """Suppressed validation is the new default, so the attribute just goes."""
        errors, output = convert(wix('    <MsiPackage SourceFile="a" SuppressSignatureValidation="yes" />'))
        assert errors == 1
        assert '<MsiPackage SourceFile="a" />' in output

    def test_ignored_keeps_attribute(self, convert):
        """An ignored report leaves the attribute in place."""
        xml = wix('    <MsiPackage SourceFile="a" SuppressSignatureValidation="yes" />')
        errors, output = convert(xml, ignore_errors=["SuppressSignatureValidationDeprecated"])
        assert errors == 0
        assert output == xml


class TestCustomAction:
    """Tests for quiet exec and WixCA renames."""

    @pytest.mark.parametrize("old,new", [
        ("WixCA", "Wix4UtilCA_X86"),
        ("UtilCA", "Wix4UtilCA_X86"),
        ("WixCA_x64", "Wix4UtilCA_X64"),
        ("UtilCA_x64", "Wix4UtilCA_X64"),
    ])
    def test_binary_key(self, convert, old, new):
        """WixCA binary ids move to the util extension names."""
        errors, output = convert(wix(f'    <CustomAction Id="ca" BinaryKey="{old}" DllEntry="Other" />'))
        assert errors == 1
        assert f'BinaryKey="{new}"' in output

    @pytest.mark.parametrize("old,new", [
        ("CAQuietExec", "WixQuietExec"),
        ("CAQuietExec64", "WixQuietExec64"),
    ])
    def test_dll_entry(self, convert, old, new):
        """Quiet exec entry points are renamed."""
        errors, output = convert(wix(f'    <CustomAction Id="ca" DllEntry="{old}" />'))
        assert errors == 1
        assert f'DllEntry="{new}"' in output

    @pytest.mark.parametrize("old,new", [
        ("QtExecCmdLine", "WixQuietExecCmdLine"),
        ("QtExec64CmdLine", "WixQuietExec64CmdLine"),
    ])
    def test_property(self, convert, old, new):
        """Quiet exec command line properties are renamed."""
        errors, output = convert(wix(f'    <CustomAction Id="ca" Property="{old}" Value="cmd" />'))
        assert errors == 1
        assert f'Property="{new}"' in output

    def test_all_renames_together(self, convert, collector):
        """Each rename is reported separately."""
        errors, output = convert(wix('    <CustomAction Id="ca" BinaryKey="WixCA" DllEntry="CAQuietExec" />'))
        assert errors == 2
        assert [m.test_type for m in collector.messages] == [
            ConverterTestType.WixCABinaryIdRenamed,
            ConverterTestType.QuietExecCustomActionsRenamed,
        ]
        assert '<CustomAction Id="ca" BinaryKey="Wix4UtilCA_X86" DllEntry="WixQuietExec" />' in output

    def test_other_binary_key(self, convert):
        """Unrelated binaries are left alone."""
        errors, _ = convert(wix('    <CustomAction Id="ca" BinaryKey="MyCA" DllEntry="Run" />'))
        assert errors == 0


class TestProperty:
    """Tests for the QtExecCmdTimeout warning."""

    def test_timeout_reported_without_change(self, convert, collector):
        """The ambiguous property is reported but cannot be fixed automatically."""
        xml = wix('    <Property Id="QtExecCmdTimeout" Value="600" />')
        errors, output = convert(xml)
        assert errors == 1
        assert collector.messages[0].test_type == ConverterTestType.QtExecCmdTimeoutAmbiguous
        assert output == xml


class TestPermissionEx:
    """Tests for util:PermissionEx/@Inheritable."""

    def test_inheritable_added(self, convert, collector):
        """Outside CreateFolder, the old default is made explicit."""
        errors, output = convert(util_wix(
            '    <Component>\n        <util:PermissionEx User="Everyone" />\n    </Component>'))
        assert errors == 1
        assert collector.messages[0].test_type == ConverterTestType.AssignPermissionExInheritable
        assert '<util:PermissionEx User="Everyone" Inheritable="no" />' in output

    def test_under_create_folder(self, convert):
        """Under CreateFolder the default did not change."""
        xml = util_wix('    <CreateFolder>\n        <util:PermissionEx User="Everyone" />\n    </CreateFolder>')
        errors, output = convert(xml)
        assert errors == 0
        assert output == xml

    def test_explicit_inheritable(self, convert):
        """An explicit value is kept."""
        errors, _ = convert(util_wix('    <util:PermissionEx User="Everyone" Inheritable="yes" />'))
        assert errors == 0

    def test_v3_document(self, convert, collector):
        """Namespaces are migrated before the element is examined."""
        xml = (f'{DECLARATION}<Wix xmlns="http://schemas.microsoft.com/wix/2006/wi" '
               f'xmlns:util="http://schemas.microsoft.com/wix/UtilExtension">\n'
               f'    <Component>\n        <util:PermissionEx User="Everyone" />\n    </Component>\n</Wix>')
        errors, output = convert(xml)
        assert errors == 3
        assert [m.test_type for m in collector.messages] == [
            ConverterTestType.XmlnsValueWrong,
            ConverterTestType.XmlnsValueWrong,
            ConverterTestType.AssignPermissionExInheritable,
        ]
        assert output == util_wix(
            '    <Component>\n        <util:PermissionEx User="Everyone" Inheritable="no" />\n    </Component>')


class TestXmlnsMissing:
    """Tests for root elements without a namespace."""

    @pytest.mark.parametrize("root", ["Wix", "Include"])
    def test_namespace_added(self, convert, collector, root):
        """The v4 namespace is declared and applied to the whole tree."""
        errors, output = convert(f'{DECLARATION}<{root}><Fragment /></{root}>')
        assert errors == 1
        assert collector.messages[0].test_type == ConverterTestType.XmlnsMissing
        assert output == f'{DECLARATION}<{root} xmlns="http://wixtoolset.org/schemas/v4/wxs"><Fragment /></{root}>'

    def test_children_get_migrated(self, convert, collector):
        """Descendants moved into the namespace go through their own migrations."""
        errors, output = convert(f'{DECLARATION}<Wix><Directory ShortName="x" /></Wix>')
        assert errors == 2
        assert collector.messages[1].test_type == ConverterTestType.AssignDirectoryNameFromShortName
        assert '<Directory Name="x" />' in output

    def test_ignored(self, convert):
        """Ignoring XmlnsMissing leaves the tree without a namespace."""
        xml = f'{DECLARATION}<Wix><Directory ShortName="x" /></Wix>'
        errors, output = convert(xml, ignore_errors=["XmlnsMissing"])
        assert errors == 0
        assert output == xml
