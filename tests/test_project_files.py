"""Tests for tracking files in groups and build phases."""

import logging
import plistlib
import re

import pytest

from pbxgraph.errors import (
    BuildPhaseNotFoundError,
    InvalidGroupError,
    InvalidTargetError,
    MalformedPreconditionError,
)
from pbxgraph.file import FileOptions
from pbxgraph.model import Reference
from pbxgraph.validator import validate_references
from tests.conftest import (
    APP_GROUP_ID,
    FRAMEWORKS_PHASE_ID,
    MAIN_GROUP_ID,
    RESOURCES_GROUP_ID,
    RESOURCES_PHASE_ID,
    SOURCES_PHASE_ID,
    TARGET_ID,
)


def _phase_files(project, isa, key):
    return project.objects[isa][key]["files"]


class TestIdentifiers:
    def test_all_uuids(self, project):
        uuids = project.all_uuids()
        assert len(uuids) == len(set(uuids))
        assert TARGET_ID in uuids
        assert all(len(uuid) == 24 for uuid in uuids)

    def test_generate_uuid(self, project):
        uuid = project.generate_uuid()
        assert re.fullmatch(r"[0-9A-F]{24}", uuid)
        assert uuid not in project.all_uuids()

    def test_generated_identifiers_are_unique(self, project):
        added = [project.add_file(f"File{i}.m", APP_GROUP_ID) for i in range(50)]
        refs = {file.file_ref for file in added}
        assert len(refs) == 50
        assert len(project.all_uuids()) == len(set(project.all_uuids()))


class TestSourceFiles:
    def test_add_source_file_to_group(self, project):
        file = project.add_source_file("Foo.m", group=APP_GROUP_ID)
        assert file.target is None
        assert project.objects["PBXFileReference"][file.file_ref]["path"] == "Foo.m"
        assert project.objects["PBXBuildFile"].comment(file.uuid) == "Foo.m in Sources"
        assert Reference(file.uuid, "Foo.m in Sources") in _phase_files(
            project, "PBXSourcesBuildPhase", SOURCES_PHASE_ID
        )
        assert Reference(file.file_ref, "Foo.m") in project.objects["PBXGroup"][APP_GROUP_ID]["children"]
        assert validate_references(project.document) == []

    def test_add_then_remove_restores_the_file(self, project, basic_text):
        project.add_source_file("Foo.m", group=APP_GROUP_ID)
        project.remove_source_file("Foo.m", group=APP_GROUP_ID)
        assert project.write() == basic_text

    def test_written_output(self, project):
        file = project.add_source_file("Foo.m", group=APP_GROUP_ID)
        text = project.write()
        assert (
            f"\t\t{file.uuid} /* Foo.m in Sources */ = {{isa = PBXBuildFile; "
            f"fileRef = {file.file_ref} /* Foo.m */; }};\n"
        ) in text
        assert (
            f"\t\t{file.file_ref} /* Foo.m */ = {{isa = PBXFileReference; fileEncoding = 4; "
            'lastKnownFileType = sourcecode.c.objc; path = Foo.m; sourceTree = "<group>"; };\n'
        ) in text

    def test_add_source_file_without_group_creates_plugins_group(self, project):
        file = project.add_source_file("src/Foo.m")
        plugins = project.pbx_group_by_name("Plugins")
        assert plugins["children"] == [Reference(file.file_ref, "Foo.m")]
        assert project.objects["PBXFileReference"][file.file_ref]["name"] == "Foo.m"
        assert validate_references(project.document) == []

    def test_duplicate_is_rejected(self, project, basic_text):
        assert project.add_source_file("AppDelegate.m", group=APP_GROUP_ID) is None
        assert project.write() == basic_text

    def test_remove_existing_source_file(self, project):
        project.remove_source_file("AppDelegate.m", group=APP_GROUP_ID)
        assert project.has_file("AppDelegate.m") is None
        assert "E4A1B2C3D4E5F6A7B8C90040" not in project.objects["PBXBuildFile"]
        comments = [entry.comment for entry in _phase_files(project, "PBXSourcesBuildPhase", SOURCES_PHASE_ID)]
        assert comments == ["main.m in Sources"]
        assert validate_references(project.document) == []

    def test_remove_file_sharing_a_basename(self, project):
        first = project.add_source_file("Foo.m", group=APP_GROUP_ID)
        second = project.add_source_file("sub/Foo.m", group=RESOURCES_GROUP_ID)
        project.remove_source_file("sub/Foo.m", group=RESOURCES_GROUP_ID)
        phase_ids = [entry.id for entry in _phase_files(project, "PBXSourcesBuildPhase", SOURCES_PHASE_ID)]
        assert first.uuid in phase_ids
        assert second.uuid not in phase_ids
        assert first.uuid in project.objects["PBXBuildFile"]
        assert project.has_file("Foo.m") is not None
        assert project.has_file("sub/Foo.m") is None
        assert validate_references(project.document) == []

    def test_path_match_wins_over_display_name(self, project):
        named = project.add_source_file("sub/Foo.m", group=RESOURCES_GROUP_ID)
        plain = project.add_source_file("Foo.m", group=APP_GROUP_ID)
        project.remove_source_file("Foo.m", group=APP_GROUP_ID)
        assert project.has_file("sub/Foo.m") is not None
        assert Reference(named.file_ref, "Foo.m") in project.objects["PBXGroup"][RESOURCES_GROUP_ID]["children"]
        assert plain.uuid not in project.objects["PBXBuildFile"]
        assert validate_references(project.document) == []

    def test_unknown_group(self, project, basic_text):
        with pytest.raises(InvalidGroupError) as excinfo:
            project.add_source_file("Lost.m", group="000000000000000000000000")
        assert "000000000000000000000000" in str(excinfo.value)
        assert project.write() == basic_text

    def test_target_without_sources_phase(self, project):
        helper = project.add_target("Helper", "framework")
        before = project.write()
        with pytest.raises(BuildPhaseNotFoundError):
            project.add_source_file("Helper.m", FileOptions(target=helper.uuid), APP_GROUP_ID)
        assert project.write() == before
        assert len(_phase_files(project, "PBXSourcesBuildPhase", SOURCES_PHASE_ID)) == 2

    def test_explicit_target(self, project):
        file = project.add_source_file("Foo.m", FileOptions(target=TARGET_ID), APP_GROUP_ID)
        assert file.target == TARGET_ID
        assert len(_phase_files(project, "PBXSourcesBuildPhase", SOURCES_PHASE_ID)) == 3

    def test_unknown_target(self, project, basic_text):
        with pytest.raises(InvalidTargetError):
            project.add_source_file("Foo.m", FileOptions(target="000000000000000000000000"), APP_GROUP_ID)
        assert project.write() == basic_text

    def test_mutations_are_logged(self, project, caplog):
        caplog.set_level(logging.DEBUG, logger="pbxgraph.project")
        project.add_source_file("Foo.m", group=APP_GROUP_ID)
        assert any("Foo.m" in record.getMessage() for record in caplog.records)


class TestHeaderFiles:
    def test_header_is_not_built(self, project):
        file = project.add_header_file("Foo.h", group=APP_GROUP_ID)
        assert file.uuid is None
        assert Reference(file.file_ref, "Foo.h") in project.objects["PBXGroup"][APP_GROUP_ID]["children"]
        assert len(project.objects["PBXBuildFile"]) == 4

    def test_remove_header(self, project, basic_text):
        project.add_header_file("Foo.h", group=APP_GROUP_ID)
        project.remove_header_file("Foo.h", group=APP_GROUP_ID)
        assert project.write() == basic_text


class TestResourceFiles:
    def test_add_resource_file(self, project):
        file = project.add_resource_file("Localizable.strings")
        assert Reference(file.uuid, "Localizable.strings in Resources") in _phase_files(
            project, "PBXResourcesBuildPhase", RESOURCES_PHASE_ID
        )
        children = project.objects["PBXGroup"][RESOURCES_GROUP_ID]["children"]
        assert children[-1] == Reference(file.file_ref, "Localizable.strings")

    def test_add_then_remove_restores_the_file(self, project, basic_text):
        project.add_resource_file("Localizable.strings")
        project.remove_resource_file("Localizable.strings")
        assert project.write() == basic_text

    def test_duplicate_is_rejected(self, project):
        assert project.add_resource_file("Images.xcassets") is None

    def test_remove_resource_sharing_a_basename(self, project):
        first = project.add_resource_file("Localizable.strings")
        second = project.add_resource_file("en.lproj/Localizable.strings", group=APP_GROUP_ID)
        project.remove_resource_file("en.lproj/Localizable.strings", group=APP_GROUP_ID)
        assert first.uuid in project.objects["PBXBuildFile"]
        assert second.uuid not in project.objects["PBXBuildFile"]
        phase_ids = [entry.id for entry in _phase_files(project, "PBXResourcesBuildPhase", RESOURCES_PHASE_ID)]
        assert first.uuid in phase_ids
        assert second.uuid not in phase_ids
        assert validate_references(project.document) == []

    def test_unknown_group(self, project, basic_text):
        with pytest.raises(InvalidGroupError):
            project.add_resource_file("Localizable.strings", group="000000000000000000000000")
        assert project.write() == basic_text

    def test_resource_into_variant_group(self, project):
        variant = project.add_localization_variant_group("Main.storyboard")
        file = project.add_resource_file(
            "Base.lproj/Main.storyboard", FileOptions(variant_group=True), variant.file_ref
        )
        children = project.objects["PBXVariantGroup"][variant.file_ref]["children"]
        assert children == [Reference(file.file_ref, "Main.storyboard")]
        # referenced by the variant group only, not built on its own
        assert file.uuid not in project.objects["PBXBuildFile"]
        assert validate_references(project.document) == []


class TestFrameworks:
    def test_add_system_framework(self, project):
        file = project.add_framework("libz.dylib")
        record = project.objects["PBXFileReference"][file.file_ref]
        assert record["path"] == "usr/lib/libz.dylib"
        assert record["sourceTree"] == "SDKROOT"
        assert len(_phase_files(project, "PBXFrameworksBuildPhase", FRAMEWORKS_PHASE_ID)) == 2
        assert project.pbx_group_by_name("Frameworks")["children"][-1] == Reference(file.file_ref, "libz.dylib")

    def test_duplicate_framework(self, project, basic_text):
        assert project.add_framework("Foundation.framework") is None
        assert project.write() == basic_text

    def test_unlinked_framework(self, project):
        project.add_framework("libz.dylib", FileOptions(link=False))
        assert len(_phase_files(project, "PBXFrameworksBuildPhase", FRAMEWORKS_PHASE_ID)) == 1

    def test_weak_framework(self, project):
        file = project.add_framework("GameKit.framework", FileOptions(weak=True))
        assert project.objects["PBXBuildFile"][file.uuid]["settings"] == {"ATTRIBUTES": ["Weak"]}

    def test_custom_framework_adds_search_path(self, project):
        project.add_framework("vendor/Custom.framework", FileOptions(custom_framework=True))
        assert project.get_build_property("FRAMEWORK_SEARCH_PATHS", "Debug") == [
            '"$(inherited)"',
            '"\\"vendor\\""',
        ]

    def test_embedded_framework(self, project):
        phase = project.add_build_phase([], "PBXCopyFilesBuildPhase", "Embed Frameworks", TARGET_ID, "frameworks")
        embedded = project.add_framework(
            "vendor/Custom.framework", FileOptions(custom_framework=True, embed=True, sign=True)
        )
        assert embedded.group == "Embed Frameworks"
        assert phase.obj["files"] == [Reference(embedded.uuid, "Custom.framework in Embed Frameworks")]
        build_file = project.objects["PBXBuildFile"][embedded.uuid]
        assert build_file["settings"] == {"ATTRIBUTES": ["CodeSignOnCopy"]}
        # the linked and the embedded build file share one file reference
        linked = [
            key
            for key, record in project.objects["PBXBuildFile"].items()
            if record["fileRef"].id == embedded.file_ref
        ]
        assert len(linked) == 2
        assert validate_references(project.document) == []

    def test_embed_without_phase_is_skipped(self, project):
        embedded = project.add_framework(
            "vendor/Custom.framework", FileOptions(custom_framework=True, embed=True)
        )
        assert embedded.uuid in project.objects["PBXBuildFile"]
        assert project.find_section("PBXCopyFilesBuildPhase") is None

    def test_remove_framework(self, project):
        project.remove_framework("Foundation.framework")
        assert project.has_file("System/Library/Frameworks/Foundation.framework") is None
        assert _phase_files(project, "PBXFrameworksBuildPhase", FRAMEWORKS_PHASE_ID) == []
        assert project.pbx_group_by_name("Frameworks")["children"] == []
        assert validate_references(project.document) == []

    def test_remove_custom_framework_drops_search_path(self, project):
        options = FileOptions(custom_framework=True)
        project.add_framework("vendor/Custom.framework", options)
        project.remove_framework("vendor/Custom.framework", options)
        assert project.get_build_property("FRAMEWORK_SEARCH_PATHS", "Debug") == ['"$(inherited)"']

    def test_remove_embedded_framework(self, project):
        phase = project.add_build_phase([], "PBXCopyFilesBuildPhase", "Embed Frameworks", TARGET_ID, "frameworks")
        options = FileOptions(custom_framework=True, embed=True, sign=True)
        project.add_framework("vendor/Custom.framework", options)
        project.remove_framework("vendor/Custom.framework", options)
        assert phase.obj["files"] == []
        assert len(_phase_files(project, "PBXFrameworksBuildPhase", FRAMEWORKS_PHASE_ID)) == 1
        assert len(project.objects["PBXBuildFile"]) == 4
        assert validate_references(project.document) == []


class TestCopyFiles:
    def test_missing_phase(self, project, basic_text):
        with pytest.raises(BuildPhaseNotFoundError):
            project.add_copyfile("readme.txt")
        assert project.write() == basic_text

    def test_add_and_remove_copyfile(self, project):
        phase = project.add_build_phase([], "PBXCopyFilesBuildPhase", "Copy Files", TARGET_ID, "application")
        file = project.add_copyfile("readme.txt")
        assert phase.obj["files"] == [Reference(file.uuid, "readme.txt in Resources")]
        project.remove_copyfile("readme.txt")
        assert phase.obj["files"] == []
        assert project.has_file("readme.txt") is None

    def test_copyfile_reuses_file_reference(self, project):
        project.add_build_phase([], "PBXCopyFilesBuildPhase", "Copy Files", TARGET_ID, "application")
        file = project.add_copyfile("main.m")
        assert file.file_ref == "E4A1B2C3D4E5F6A7B8C90034"
        assert len(project.objects["PBXFileReference"]) == 7


class TestStaticLibraries:
    def test_add_static_library(self, project):
        file = project.add_static_library("libFoo.a")
        assert Reference(file.uuid, "libFoo.a in Frameworks") in _phase_files(
            project, "PBXFrameworksBuildPhase", FRAMEWORKS_PHASE_ID
        )
        assert project.get_build_property("LIBRARY_SEARCH_PATHS", "Release") == [
            '"$(inherited)"',
            '"\\"$(SRCROOT)/KitchenSink\\""',
        ]

    def test_plugin_static_library(self, project):
        file = project.add_static_library("libBar.a", FileOptions(plugin=True))
        assert project.pbx_group_by_name("Plugins")["children"] == [Reference(file.file_ref, "libBar.a")]


class TestPluginFiles:
    def test_add_and_remove_plugin_file(self, project):
        file = project.add_plugin_file("Plugin.h")
        assert file.plugin
        assert project.has_file("Plugin.h") is not None
        project.remove_plugin_file("Plugin.h")
        assert project.has_file("Plugin.h") is None
        assert project.pbx_group_by_name("Plugins")["children"] == []


class TestProductFiles:
    def test_add_and_remove_product_file(self, project):
        file = project.add_product_file("Helper", FileOptions(explicit_file_type="compiled.mach-o.dylib"))
        assert file.basename == "Helper.dylib"
        assert project.pbx_group_by_name("Products")["children"][-1] == Reference(file.file_ref, "Helper.dylib")
        project.remove_product_file("Helper", FileOptions(explicit_file_type="compiled.mach-o.dylib"))
        assert project.has_file("Helper.dylib") is None
        assert len(project.pbx_group_by_name("Products")["children"]) == 1


class TestGroups:
    def test_add_pbx_group_reuses_file_references(self, project):
        group = project.add_pbx_group(["main.m", "Extra.m"], "Extra", "Extra")
        children = group.obj["children"]
        assert children[0] == Reference("E4A1B2C3D4E5F6A7B8C90034", "main.m")
        assert children[1].comment == "Extra.m"
        assert project.has_file("Extra.m") is not None
        assert group.obj["path"] == "Extra"
        assert project.objects["PBXGroup"].comment(group.uuid) == "Extra"

    def test_remove_pbx_group_scrubs_children(self, project):
        group = project.add_pbx_group([], "Extra")
        project.add_to_pbx_group(group.uuid, MAIN_GROUP_ID)
        assert Reference(group.uuid, "Extra") in project.objects["PBXGroup"][MAIN_GROUP_ID]["children"]
        project.remove_pbx_group("Extra")
        assert project.pbx_group_by_name("Extra") is None
        assert group.uuid not in [child.id for child in project.objects["PBXGroup"][MAIN_GROUP_ID]["children"]]
        assert validate_references(project.document) == []

    def test_group_type(self, project):
        variant = project.add_localization_variant_group("Main.storyboard")
        assert project.group_type(APP_GROUP_ID) == "PBXGroup"
        assert project.group_type(variant.file_ref) == "PBXVariantGroup"
        with pytest.raises(InvalidGroupError):
            project.group_type(TARGET_ID)

    def test_find_group_keys(self, project):
        assert project.find_pbx_group_key(name="Supporting Files") == "E4A1B2C3D4E5F6A7B8C90005"
        assert project.find_pbx_group_key(path="KitchenSink") == APP_GROUP_ID
        assert project.find_pbx_group_key() is None
        assert project.find_pbx_variant_group_key(name="Main.storyboard") is None

    def test_create_group(self, project):
        key = project.pbx_create_group("Tests", "KitchenSinkTests")
        record = project.get_pbx_group_by_key(key)
        assert record == {
            "isa": "PBXGroup",
            "children": [],
            "name": "Tests",
            "path": "KitchenSinkTests",
            "sourceTree": '"<group>"',
        }

    def test_localization_variant_group(self, project):
        variant = project.add_localization_variant_group("Main.storyboard")
        assert project.find_pbx_variant_group_key(name="Main.storyboard") == variant.file_ref
        children = project.objects["PBXGroup"][RESOURCES_GROUP_ID]["children"]
        assert children[-1] == Reference(variant.file_ref, "Main.storyboard")
        assert Reference(variant.uuid, "Main.storyboard in Resources") in _phase_files(
            project, "PBXResourcesBuildPhase", RESOURCES_PHASE_ID
        )
        assert list(project.objects).index("PBXVariantGroup") == list(project.objects).index(
            "PBXSourcesBuildPhase"
        ) + 1


class TestDataModels:
    def _model(self, tmp_path, versions, current=None):
        bundle = tmp_path / "Model.xcdatamodeld"
        bundle.mkdir()
        for version in versions:
            (bundle / version).mkdir()
        if current:
            with open(bundle / ".xccurrentversion", "wb") as f:
                plistlib.dump({"_XCCurrentVersionName": current}, f)
        return str(bundle)

    def test_add_data_model_document(self, project, tmp_path):
        path = self._model(tmp_path, ["Model.xcdatamodel", "Model 2.xcdatamodel"], "Model 2.xcdatamodel")
        file = project.add_data_model_document(path)
        version_group = project.objects["XCVersionGroup"][file.file_ref]
        assert len(version_group["children"]) == 2
        assert version_group["currentVersion"].comment == "Model 2.xcdatamodel"
        assert version_group["versionGroupType"] == "wrapper.xcdatamodel"
        assert Reference(file.uuid, "Model.xcdatamodeld in Sources") in _phase_files(
            project, "PBXSourcesBuildPhase", SOURCES_PHASE_ID
        )
        assert validate_references(project.document) == []

    def test_first_version_is_current_by_default(self, project, tmp_path):
        path = self._model(tmp_path, ["B.xcdatamodel", "A.xcdatamodel"])
        file = project.add_data_model_document(path)
        assert file.current_model.basename == "A.xcdatamodel"

    def test_duplicate_bundle_is_rejected(self, project, tmp_path):
        path = self._model(tmp_path, ["Model.xcdatamodel"])
        assert project.add_data_model_document(path) is not None
        before = project.write()
        assert project.add_data_model_document(path) is None
        assert project.write() == before
        assert len(project.objects["XCVersionGroup"]) == 1

    def test_unknown_group(self, project, tmp_path, basic_text):
        path = self._model(tmp_path, ["Model.xcdatamodel"])
        with pytest.raises(InvalidGroupError):
            project.add_data_model_document(path, group="Missing")
        assert project.write() == basic_text

    def test_empty_bundle(self, project, tmp_path, basic_text):
        path = self._model(tmp_path, [])
        with pytest.raises(MalformedPreconditionError):
            project.add_data_model_document(path)
        assert project.write() == basic_text
