"""Tests for file descriptors."""

import pytest

from pbxgraph.file import (
    ExplicitTypeFile,
    FileOptions,
    InferredTypeFile,
    LocalizationGroup,
    describe,
    file_group,
    file_path,
)
from pbxgraph.objects import file_reference_record, long_comment
from pbxgraph.utils import quote_if_needed, same_value, unquote


class TestDescribe:
    def test_source_file(self):
        file = describe("src/Foo.swift")
        assert isinstance(file, InferredTypeFile)
        assert file.basename == "Foo.swift"
        assert file.path == "src/Foo.swift"
        assert file.last_known_file_type == "sourcecode.swift"
        assert file.group == "Sources"
        assert file.source_tree == '"<group>"'
        assert file.file_encoding == 4

    def test_system_framework(self):
        file = describe("Foundation.framework")
        assert file.path == "System/Library/Frameworks/Foundation.framework"
        assert file.source_tree == "SDKROOT"
        assert file.group == "Frameworks"
        assert file.file_encoding is None

    def test_system_library(self):
        file = describe("libz.tbd")
        assert file.path == "usr/lib/libz.tbd"
        assert file.source_tree == "SDKROOT"

    def test_custom_framework_keeps_its_path(self):
        file = describe("vendor/Custom.framework", FileOptions(custom_framework=True))
        assert file.path == "vendor/Custom.framework"
        assert file.dirname == "vendor"
        assert file.source_tree == '"<group>"'

    def test_embedded_custom_framework(self):
        file = describe("vendor/Custom.framework", FileOptions(custom_framework=True, embed=True, sign=True))
        assert file.group == "Embed Frameworks"
        assert file.settings == {"ATTRIBUTES": ["CodeSignOnCopy"]}

    def test_unknown_extension(self):
        file = describe("notes.unknownext")
        assert file.last_known_file_type == "unknown"
        assert file.group == "Resources"

    def test_backslashes_are_normalized(self):
        file = describe("dir\\file.h")
        assert file.path == "dir/file.h"
        assert file.basename == "file.h"

    def test_data_model_document_goes_to_sources(self):
        assert describe("Model.xcdatamodeld").group == "Sources"

    def test_settings(self):
        file = describe("Legacy.m", FileOptions(weak=True, compiler_flags="-fno-objc-arc"))
        assert file.settings == {"ATTRIBUTES": ["Weak"], "COMPILER_FLAGS": '"-fno-objc-arc"'}

    def test_no_settings_by_default(self):
        assert describe("main.m").settings is None

    def test_overrides(self):
        file = describe("Foo.m", FileOptions(last_known_file_type="text", source_tree="SOURCE_ROOT"))
        assert file.last_known_file_type == "text"
        assert file.source_tree == "SOURCE_ROOT"


class TestExplicitTypeFile:
    def test_product_gets_default_extension(self):
        file = describe("MyLib", FileOptions(explicit_file_type="archive.ar"))
        assert isinstance(file, ExplicitTypeFile)
        assert file.basename == "MyLib.a"
        assert file.source_tree == "BUILT_PRODUCTS_DIR"
        assert not hasattr(file, "path")
        assert not hasattr(file, "last_known_file_type")
        assert file_group(file) is None

    def test_unknown_explicit_type_keeps_name(self):
        file = describe("Thing", FileOptions(explicit_file_type="compiled.unknown"))
        assert file.basename == "Thing"

    def test_product_reference_record(self):
        file = describe("Widget", FileOptions(explicit_file_type="wrapper.app-extension"))
        file.product_path = file.basename
        assert file_reference_record(file) == {
            "isa": "PBXFileReference",
            "explicitFileType": '"wrapper.app-extension"',
            "includeInIndex": 0,
            "path": "Widget.appex",
            "sourceTree": "BUILT_PRODUCTS_DIR",
        }
        assert file_path(file) == "Widget.appex"


class TestRecords:
    def test_file_reference_record_names_only_when_needed(self):
        assert "name" not in file_reference_record(describe("main.m"))
        assert file_reference_record(describe("src/main.m"))["name"] == "main.m"

    def test_file_reference_record_quotes_paths(self):
        record = file_reference_record(describe("Supporting Files/Info.plist"))
        assert record["path"] == '"Supporting Files/Info.plist"'
        assert record["sourceTree"] == '"<group>"'
        assert record["fileEncoding"] == 4

    def test_long_comment(self):
        assert long_comment(describe("main.m")) == "main.m in Sources"
        group = LocalizationGroup(uuid="A", file_ref="B", basename="Main.storyboard")
        assert long_comment(group) == "Main.storyboard in Resources"

    def test_unsupported_descriptor(self):
        with pytest.raises(TypeError):
            file_path(LocalizationGroup(uuid="A", file_ref="B", basename="x"))


class TestQuoting:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("main.m", "main.m"),
            ("$(SRCROOT)", '"$(SRCROOT)"'),
            ("Supporting Files", '"Supporting Files"'),
            ("", '""'),
            ('"already"', '"already"'),
            ('say "hi"', '"say \\"hi\\""'),
        ],
    )
    def test_quote_if_needed(self, value, expected):
        assert quote_if_needed(value) == expected

    def test_unquote(self):
        assert unquote('"a b"') == "a b"
        assert unquote("ab") == "ab"
        assert unquote(None) == ""

    def test_same_value(self):
        assert same_value('"KitchenSink"', "KitchenSink")
        assert not same_value(None, "KitchenSink")
