"""
Xcode project graph.

`Project` owns a parsed project.pbxproj and exposes every edit the package
supports: tracking files in groups and build phases, creating targets and
their configurations, wiring dependencies and updating build settings. Each
add operation allocates fresh identifiers, writes every record it needs and
keeps the labels next to identifiers in step with the records they name.
Each remove operation undoes the same records.
"""

import logging
import os
import plistlib
import posixpath
import re
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union
from uuid import uuid4

from pbxgraph.config import WriterOptions
from pbxgraph.errors import (
    BuildPhaseNotFoundError,
    InvalidArgumentError,
    InvalidGroupError,
    InvalidTargetError,
    MalformedPreconditionError,
)
from pbxgraph.file import (
    ExplicitTypeFile,
    FileDescriptor,
    FileOptions,
    InferredTypeFile,
    LocalizationGroup,
    PbxFile,
    PhaseMember,
    describe,
    file_group,
    file_path,
)
from pbxgraph.formatter import format_project
from pbxgraph.model import (
    DEFAULT_SOURCETREE,
    FILETYPE_BY_PRODUCTTYPE,
    INHERITED,
    PRODUCTTYPE_BY_TARGETTYPE,
    FileType,
    ObjectEntry,
    ProductType,
    ProjectDocument,
    ProxyType,
    Reference,
    Section,
    TargetEntry,
    TargetKind,
    TargetType,
)
from pbxgraph.objects import (
    ShellScriptOptions,
    build_file_record,
    copy_files_phase_fields,
    file_reference_comment,
    file_reference_record,
    group_child,
    localization_group,
    long_comment,
    phase_entry,
    ref_id,
    search_path_for_file,
    shell_script_phase_fields,
    xcode_ordered,
)
from pbxgraph.parser import parse_project
from pbxgraph.utils import quote, quote_if_needed, same_value, unquote

logger = logging.getLogger(__name__)

COPY_FILES = "Copy Files"
EMBED_FRAMEWORKS = "Embed Frameworks"
LD_RUNPATH_SEARCH_PATHS = '"$(inherited) @executable_path/Frameworks @executable_path/../../Frameworks"'


class Project:
    def __init__(self, filename: Optional[str] = None):
        self.filepath = os.path.abspath(filename) if filename else None
        self.document: Optional[ProjectDocument] = None

    # ------------------------------------------------------------------
    # Reading and writing

    @classmethod
    def from_string(cls, text: str) -> "Project":
        project = cls()
        project.document = parse_project(text)
        return project

    def parse(self) -> "Project":
        if self.filepath is None:
            raise MalformedPreconditionError("Project has no file to parse")
        with open(self.filepath, "r", encoding="utf-8") as f:
            self.document = parse_project(f.read())
        logger.debug("parsed %s", self.filepath)
        return self

    def write(self, options: Optional[WriterOptions] = None) -> str:
        return format_project(self._document(), options)

    def save(self, path: Optional[str] = None, options: Optional[WriterOptions] = None) -> None:
        destination = path or self.filepath
        if destination is None:
            raise MalformedPreconditionError("No destination path to save the project to")
        with open(destination, "w", encoding="utf-8") as f:
            f.write(self.write(options))
        logger.debug("wrote %s", destination)

    def _document(self) -> ProjectDocument:
        if self.document is None:
            raise MalformedPreconditionError("Project has not been parsed")
        return self.document

    @property
    def objects(self) -> Dict[str, Section]:
        return self._document().objects

    # ------------------------------------------------------------------
    # Identifiers

    def all_uuids(self) -> List[str]:
        return [key for section in self.objects.values() for key in section if len(key) == 24]

    def generate_uuid(self) -> str:
        existing = set(self.all_uuids())
        while True:
            candidate = uuid4().hex[:24].upper()
            if candidate not in existing:
                return candidate

    # ------------------------------------------------------------------
    # Sections

    def objects_section(self, isa: str) -> Section:
        """
        Return the section for an isa, creating it when missing.

        New sections are inserted in sorted position so the file keeps the
        order Xcode writes sections in.
        """
        objects = self.objects
        if isa not in objects:
            ordered = list(objects.items())
            index = next((i for i, (name, _) in enumerate(ordered) if name > isa), len(ordered))
            ordered.insert(index, (isa, Section()))
            objects.clear()
            objects.update(ordered)
            logger.debug("created %s section", isa)
        return objects[isa]

    def find_section(self, isa: str) -> Optional[Section]:
        return self.objects.get(isa)

    def pbx_project_section(self) -> Section:
        return self.objects_section("PBXProject")

    def pbx_build_file_section(self) -> Section:
        return self.objects_section("PBXBuildFile")

    def pbx_xc_build_configuration_section(self) -> Section:
        return self.objects_section("XCBuildConfiguration")

    def pbx_file_reference_section(self) -> Section:
        return self.objects_section("PBXFileReference")

    def pbx_native_target_section(self) -> Section:
        return self.objects_section("PBXNativeTarget")

    def xc_version_group_section(self) -> Section:
        return self.objects_section("XCVersionGroup")

    def pbx_xc_configuration_list(self) -> Section:
        return self.objects_section("XCConfigurationList")

    def get_pbx_object(self, isa: str) -> Optional[Section]:
        return self.find_section(isa)

    # ------------------------------------------------------------------
    # Lookups

    def pbx_item_by_comment(self, name: str, isa: str) -> Optional[Dict[str, Any]]:
        key = self._key_by_comment(name, isa)
        return self.objects[isa][key] if key is not None else None

    def _key_by_comment(self, name: str, isa: str) -> Optional[str]:
        section = self.find_section(isa)
        if section is None:
            return None
        for key, _, comment in section.entries():
            if same_value(comment, name):
                return key
        return None

    def pbx_group_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return self.pbx_item_by_comment(name, "PBXGroup")

    def pbx_target_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return self.pbx_item_by_comment(name, "PBXNativeTarget")

    def find_target_key(self, name: str) -> Optional[str]:
        section = self.find_section("PBXNativeTarget") or {}
        for key, target in section.items():
            if same_value(target.get("name"), name):
                return key
        return None

    def get_pbx_group_by_key_and_type(self, key: Optional[str], group_type: str) -> Optional[Dict[str, Any]]:
        section = self.find_section(group_type)
        if section is None or key is None:
            return None
        return section.get(key)

    def get_pbx_group_by_key(self, key: Optional[str]) -> Optional[Dict[str, Any]]:
        return self.get_pbx_group_by_key_and_type(key, "PBXGroup")

    def get_pbx_variant_group_by_key(self, key: Optional[str]) -> Optional[Dict[str, Any]]:
        return self.get_pbx_group_by_key_and_type(key, "PBXVariantGroup")

    def find_pbx_group_key_and_type(
        self, group_type: str, name: Optional[str] = None, path: Optional[str] = None
    ) -> Optional[str]:
        if not name and not path:
            return None
        for key, group in (self.find_section(group_type) or {}).items():
            if path and not same_value(group.get("path"), path):
                continue
            if name and not same_value(group.get("name"), name):
                continue
            return key
        return None

    def find_pbx_group_key(self, name: Optional[str] = None, path: Optional[str] = None) -> Optional[str]:
        return self.find_pbx_group_key_and_type("PBXGroup", name=name, path=path)

    def find_pbx_variant_group_key(
        self, name: Optional[str] = None, path: Optional[str] = None
    ) -> Optional[str]:
        return self.find_pbx_group_key_and_type("PBXVariantGroup", name=name, path=path)

    def group_type(self, key: Optional[str]) -> str:
        """
        Section holding the group `key`: PBXGroup or PBXVariantGroup.

        Raises:
            InvalidGroupError: If key is in neither section.
        """
        if self.get_pbx_group_by_key(key) is not None:
            return "PBXGroup"
        if self.get_pbx_variant_group_by_key(key) is not None:
            return "PBXVariantGroup"
        raise InvalidGroupError(key)

    def _version_group_key(self, path: str) -> Optional[str]:
        for key, record in (self.find_section("XCVersionGroup") or {}).items():
            if same_value(record.get("path"), path):
                return key
        return None

    def get_first_project(self) -> ObjectEntry:
        section = self.find_section("PBXProject")
        if not section:
            raise MalformedPreconditionError("Project file has no PBXProject object")
        key = next(iter(section))
        return ObjectEntry(key, section[key])

    def get_first_target(self) -> ObjectEntry:
        targets = self.get_first_project().obj.get("targets") or []
        if not targets:
            raise MalformedPreconditionError("Project has no targets")
        uuid = ref_id(targets[0])
        entry = self._target_entry(uuid)
        if entry is None:
            raise InvalidTargetError(uuid)
        return ObjectEntry(entry.uuid, entry.obj)

    def get_target(self, product_type: Union[ProductType, str]) -> Optional[ObjectEntry]:
        wanted = product_type.value if isinstance(product_type, ProductType) else product_type
        native = self.find_section("PBXNativeTarget") or {}
        for target in self.get_first_project().obj.get("targets") or []:
            uuid = ref_id(target)
            record = native.get(uuid)
            if record is not None and same_value(record.get("productType"), wanted):
                return ObjectEntry(uuid, record)
        return None

    def _target_entry(self, uuid: Optional[str]) -> Optional[TargetEntry]:
        for kind in TargetKind:
            section = self.find_section(kind.value)
            if section is not None and uuid in section:
                return TargetEntry(kind, uuid, section[uuid])
        return None

    def all_targets(self) -> List[TargetEntry]:
        """Native, aggregate and legacy targets, in section order."""
        entries = []
        for kind in TargetKind:
            for key, record in (self.find_section(kind.value) or {}).items():
                entries.append(TargetEntry(kind, key, record))
        return entries

    def has_file(self, path: str) -> Optional[Dict[str, Any]]:
        key = self._file_reference_key(path)
        return self.objects["PBXFileReference"][key] if key is not None else None

    def _file_reference_key(self, path: Optional[str]) -> Optional[str]:
        if path is None:
            return None
        for key, record in (self.find_section("PBXFileReference") or {}).items():
            if same_value(record.get("path"), path):
                return key
        return None

    @property
    def product_name(self) -> Optional[str]:
        for _, config in self._configurations():
            value = config.get("buildSettings", {}).get("PRODUCT_NAME")
            if value:
                return unquote(value)
        return None

    # ------------------------------------------------------------------
    # Build phases

    def build_phase(self, group: str, target: Optional[str]) -> Optional[str]:
        """
        Identifier of the build phase labelled `group` in a target.

        Raises:
            InvalidTargetError: If target is not a native target.
        """
        if not target:
            return None
        native = self.find_section("PBXNativeTarget")
        if native is None or target not in native:
            raise InvalidTargetError(target)
        for phase in native[target].get("buildPhases") or []:
            if isinstance(phase, Reference) and phase.comment == group:
                return phase.id
        return None

    def build_phase_object(self, isa: str, group: str, target: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        The build phase record labelled `group` in a target.

        Without a target, the first phase with that label in the project is
        returned. A target without such a phase of its own gives None.
        """
        section = self.find_section(isa)
        if section is None:
            return None
        phase_id = self.build_phase(group, target)
        if target and phase_id is None:
            return None
        for key, record, comment in section.entries():
            if phase_id and key != phase_id:
                continue
            if comment == group:
                return record
        return None

    def _require_phase(self, isa: str, group: str, target: Optional[str]) -> Dict[str, Any]:
        phase = self.build_phase_object(isa, group, target)
        if phase is None:
            raise BuildPhaseNotFoundError(group, target)
        return phase

    def pbx_sources_build_phase_obj(self, target: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return self.build_phase_object("PBXSourcesBuildPhase", "Sources", target)

    def pbx_resources_build_phase_obj(self, target: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return self.build_phase_object("PBXResourcesBuildPhase", "Resources", target)

    def pbx_frameworks_build_phase_obj(self, target: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return self.build_phase_object("PBXFrameworksBuildPhase", "Frameworks", target)

    def pbx_embed_frameworks_build_phase_obj(self, target: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return self.build_phase_object("PBXCopyFilesBuildPhase", EMBED_FRAMEWORKS, target)

    def pbx_copyfiles_build_phase_obj(self, target: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return self.build_phase_object("PBXCopyFilesBuildPhase", COPY_FILES, target)

    @staticmethod
    def _splice_first(entries: List[Any], label: str, uuid: Optional[str] = None) -> None:
        for index, entry in enumerate(entries):
            if not isinstance(entry, Reference) or entry.comment != label:
                continue
            if uuid is not None and entry.id != uuid:
                continue
            del entries[index]
            return

    def add_to_pbx_sources_build_phase(self, file: PhaseMember) -> None:
        phase = self._require_phase("PBXSourcesBuildPhase", "Sources", file.target)
        phase.setdefault("files", []).append(phase_entry(file))

    def remove_from_pbx_sources_build_phase(self, file: PhaseMember) -> None:
        phase = self.pbx_sources_build_phase_obj(file.target)
        if phase is not None and file.uuid is not None:
            self._splice_first(phase.get("files", []), long_comment(file), file.uuid)

    def add_to_pbx_resources_build_phase(self, file: PhaseMember) -> None:
        phase = self._require_phase("PBXResourcesBuildPhase", "Resources", file.target)
        phase.setdefault("files", []).append(phase_entry(file))

    def remove_from_pbx_resources_build_phase(self, file: PhaseMember) -> None:
        phase = self.pbx_resources_build_phase_obj(file.target)
        if phase is not None and file.uuid is not None:
            self._splice_first(phase.get("files", []), long_comment(file), file.uuid)

    def add_to_pbx_frameworks_build_phase(self, file: PhaseMember) -> None:
        phase = self._require_phase("PBXFrameworksBuildPhase", "Frameworks", file.target)
        phase.setdefault("files", []).append(phase_entry(file))

    def remove_from_pbx_frameworks_build_phase(self, file: PhaseMember) -> None:
        phase = self.pbx_frameworks_build_phase_obj(file.target)
        if phase is not None and file.uuid is not None:
            self._splice_first(phase.get("files", []), long_comment(file), file.uuid)

    def add_to_pbx_embed_frameworks_build_phase(self, file: PhaseMember) -> None:
        phase = self.pbx_embed_frameworks_build_phase_obj(file.target)
        if phase is None:
            logger.debug("no %s phase, %s not embedded", EMBED_FRAMEWORKS, file.basename)
            return
        phase.setdefault("files", []).append(phase_entry(file))

    def remove_from_pbx_embed_frameworks_build_phase(self, file: PhaseMember) -> None:
        phase = self.pbx_embed_frameworks_build_phase_obj(file.target)
        if phase is not None and file.uuid is not None:
            self._splice_first(phase.get("files", []), long_comment(file), file.uuid)

    def add_to_pbx_copyfiles_build_phase(self, file: PhaseMember) -> None:
        phase = self._require_phase("PBXCopyFilesBuildPhase", COPY_FILES, file.target)
        phase.setdefault("files", []).append(phase_entry(file))

    def remove_from_pbx_copyfiles_build_phase(self, file: PhaseMember) -> None:
        phase = self.pbx_copyfiles_build_phase_obj(file.target)
        if phase is not None and file.uuid is not None:
            self._splice_first(phase.get("files", []), long_comment(file), file.uuid)

    # ------------------------------------------------------------------
    # Build files and file references

    def add_to_pbx_build_file_section(self, file: PhaseMember) -> None:
        self.pbx_build_file_section().add(file.uuid, build_file_record(file), long_comment(file))
        logger.debug("added build file %s for %s", file.uuid, file.basename)

    def remove_from_pbx_build_file_section(
        self, file: PhaseMember, phase: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Remove the build file that puts `file` in a phase.

        The build file must point at `file.file_ref` and carry the file's
        "<basename> in <group>" label. When `phase` is given, only a build
        file listed in that phase matches. Sets `file.uuid` to the removed
        identifier.
        """
        section = self.find_section("PBXBuildFile")
        if section is None or file.file_ref is None:
            return
        label = long_comment(file)
        in_phase = {ref_id(entry) for entry in phase.get("files") or []} if phase is not None else None
        for key, record, comment in section.entries():
            if ref_id(record.get("fileRef")) != file.file_ref or comment != label:
                continue
            if in_phase is not None and key not in in_phase:
                continue
            file.uuid = key
            del section[key]
            logger.debug("removed build file %s for %s", key, file.basename)
            return

    def add_to_pbx_file_reference_section(self, file: FileDescriptor) -> None:
        self.pbx_file_reference_section().add(
            file.file_ref, file_reference_record(file), file_reference_comment(file)
        )
        logger.debug("added file reference %s for %s", file.file_ref, file.basename)

    def remove_from_pbx_file_reference_section(self, file: FileDescriptor) -> FileDescriptor:
        section = self.find_section("PBXFileReference")
        if section is None:
            return file
        path = file_path(file) or file.basename
        # a path match wins over a display name shared by several files
        key = self._file_reference_key(path)
        if key is None:
            key = next((k for k, record in section.items() if same_value(record.get("name"), file.basename)), None)
        if key is not None:
            file.file_ref = key
            del section[key]
            logger.debug("removed file reference %s for %s", key, file.basename)
        return file

    def add_to_xc_version_group_section(self, file: InferredTypeFile) -> None:
        if not file.models or file.current_model is None:
            raise MalformedPreconditionError(
                "Cannot create a XCVersionGroup section from not a data model document file"
            )
        section = self.xc_version_group_section()
        if file.file_ref in section:
            return
        name = posixpath.basename(file.path)
        record = {
            "isa": "XCVersionGroup",
            "children": [Reference(model.file_ref, model.basename) for model in file.models],
            "currentVersion": Reference(file.current_model.file_ref, file.current_model.basename),
            "name": quote_if_needed(name),
            "path": quote_if_needed(file.path),
            "sourceTree": DEFAULT_SOURCETREE,
            "versionGroupType": FileType.XCDATAMODEL.value,
        }
        section.add(file.file_ref, record, name)

    def add_to_pbx_native_target_section(self, uuid: str, target: Dict[str, Any]) -> None:
        self.pbx_native_target_section().add(uuid, target, unquote(target.get("name")))

    def add_to_pbx_project_section(self, uuid: str, target: Dict[str, Any]) -> None:
        project = self.get_first_project().obj
        project.setdefault("targets", []).append(Reference(uuid, unquote(target.get("name"))))

    def _correct_for_path(self, file: FileDescriptor, group_name: str) -> None:
        # files under a group with its own path are stored relative to it
        group = self.pbx_group_by_name(group_name)
        if isinstance(file, InferredTypeFile) and group is not None and group.get("path"):
            file.path = re.sub(rf"^{re.escape(group_name)}[\\/]", "", file.path)

    # ------------------------------------------------------------------
    # Groups

    def add_pbx_group(
        self,
        file_paths: List[str],
        name: str,
        path: Optional[str] = None,
        source_tree: Optional[str] = None,
    ) -> ObjectEntry:
        """
        Create a group holding the given paths.

        Paths already tracked reuse their file reference; other paths get a
        new file reference and build file.
        """
        group_uuid = self.generate_uuid()
        group: Dict[str, Any] = {"isa": "PBXGroup", "children": [], "name": quote_if_needed(name)}
        if path:
            group["path"] = quote_if_needed(path)
        group["sourceTree"] = source_tree or DEFAULT_SOURCETREE

        known: Dict[str, Reference] = {}
        for key, record, comment in (self.find_section("PBXFileReference") or Section()).entries():
            if record.get("path") is not None:
                known[unquote(record["path"])] = Reference(key, comment)

        for file_path_ in file_paths:
            existing = known.get(unquote(file_path_))
            if existing is not None:
                group["children"].append(Reference(existing.id, existing.comment))
                continue
            file = describe(file_path_)
            file.uuid = self.generate_uuid()
            file.file_ref = self.generate_uuid()
            self.add_to_pbx_file_reference_section(file)
            self.add_to_pbx_build_file_section(file)
            group["children"].append(group_child(file))

        self.objects_section("PBXGroup").add(group_uuid, group, name)
        logger.debug("added group %s (%s)", name, group_uuid)
        return ObjectEntry(group_uuid, group)

    def remove_pbx_group(self, name: str) -> None:
        section = self.find_section("PBXGroup")
        if section is None:
            return
        removed = [key for key, _, comment in section.entries() if same_value(comment, name)]
        for key in removed:
            del section[key]
        if removed:
            self._scrub_references({"children"}, set(removed))
            logger.debug("removed group %s (%s)", name, ", ".join(removed))

    def pbx_create_group_with_type(self, name: str, path_name: Optional[str], group_type: str) -> str:
        group: Dict[str, Any] = {"isa": group_type, "children": [], "name": quote_if_needed(name)}
        if path_name:
            group["path"] = quote_if_needed(path_name)
        group["sourceTree"] = DEFAULT_SOURCETREE
        key = self.generate_uuid()
        self.objects_section(group_type).add(key, group, name)
        return key

    def pbx_create_variant_group(self, name: str) -> str:
        return self.pbx_create_group_with_type(name, None, "PBXVariantGroup")

    def pbx_create_group(self, name: str, path_name: Optional[str] = None) -> str:
        return self.pbx_create_group_with_type(name, path_name, "PBXGroup")

    def add_to_pbx_group_type(
        self, file: Union[PhaseMember, str], group_key: Optional[str], group_type: str
    ) -> None:
        group = self.get_pbx_group_by_key_and_type(group_key, group_type)
        if group is None or group.get("children") is None:
            return
        if isinstance(file, str):
            # a group key
            child_group = self.get_pbx_group_by_key(file) or self.get_pbx_variant_group_by_key(file)
            comment = unquote(child_group.get("name")) if child_group else None
            group["children"].append(Reference(file, comment))
        else:
            group["children"].append(group_child(file))

    def add_to_pbx_variant_group(self, file: Union[PhaseMember, str], group_key: Optional[str]) -> None:
        self.add_to_pbx_group_type(file, group_key, "PBXVariantGroup")

    def add_to_pbx_group(self, file: Union[PhaseMember, str], group_key: Optional[str]) -> None:
        self.add_to_pbx_group_type(file, group_key, "PBXGroup")

    def remove_from_pbx_group_and_type(self, file: PhaseMember, group_key: Optional[str], group_type: str) -> None:
        group = self.get_pbx_group_by_key_and_type(group_key, group_type)
        if group is not None:
            self._splice_first(group.get("children", []), file.basename, file.file_ref)

    def remove_from_pbx_group(self, file: PhaseMember, group_key: Optional[str]) -> None:
        self.remove_from_pbx_group_and_type(file, group_key, "PBXGroup")

    def remove_from_pbx_variant_group(self, file: PhaseMember, group_key: Optional[str]) -> None:
        self.remove_from_pbx_group_and_type(file, group_key, "PBXVariantGroup")

    def _add_to_named_group(self, file: FileDescriptor, name: str) -> None:
        group = self.pbx_group_by_name(name)
        if group is None:
            self.add_pbx_group([file_path(file) or file.basename], name)
        else:
            group.setdefault("children", []).append(group_child(file))

    def _remove_from_named_group(self, file: FileDescriptor, name: str) -> None:
        group = self.pbx_group_by_name(name)
        if group is not None:
            self._splice_first(group.get("children", []), file.basename, file.file_ref)

    def add_to_plugins_pbx_group(self, file: FileDescriptor) -> None:
        self._add_to_named_group(file, "Plugins")

    def remove_from_plugins_pbx_group(self, file: FileDescriptor) -> None:
        self._remove_from_named_group(file, "Plugins")

    def add_to_resources_pbx_group(self, file: FileDescriptor) -> None:
        self._add_to_named_group(file, "Resources")

    def remove_from_resources_pbx_group(self, file: FileDescriptor) -> None:
        self._remove_from_named_group(file, "Resources")

    def add_to_frameworks_pbx_group(self, file: FileDescriptor) -> None:
        self._add_to_named_group(file, "Frameworks")

    def remove_from_frameworks_pbx_group(self, file: FileDescriptor) -> None:
        self._remove_from_named_group(file, "Frameworks")

    def add_to_products_pbx_group(self, file: FileDescriptor) -> None:
        self._add_to_named_group(file, "Products")

    def remove_from_products_pbx_group(self, file: FileDescriptor) -> None:
        self._remove_from_named_group(file, "Products")

    def add_localization_variant_group(self, name: str) -> LocalizationGroup:
        self._require_phase("PBXResourcesBuildPhase", "Resources", None)
        group_key = self.pbx_create_variant_group(name)
        resources_group_key = self.find_pbx_group_key(name="Resources")
        self.add_to_pbx_group(group_key, resources_group_key)
        variant_group = localization_group(self.generate_uuid(), group_key, name)
        self.add_to_pbx_build_file_section(variant_group)
        self.add_to_pbx_resources_build_phase(variant_group)
        return variant_group

    # ------------------------------------------------------------------
    # Files

    def add_plugin_file(self, path: str, options: Optional[FileOptions] = None) -> Optional[FileDescriptor]:
        file = describe(path, options)
        file.plugin = True
        self._correct_for_path(file, "Plugins")
        if isinstance(file, InferredTypeFile) and self.has_file(file.path):
            logger.debug("%s is already tracked", file.path)
            return None
        file.file_ref = self.generate_uuid()
        self.add_to_pbx_file_reference_section(file)
        self.add_to_plugins_pbx_group(file)
        return file

    def remove_plugin_file(self, path: str, options: Optional[FileOptions] = None) -> FileDescriptor:
        file = describe(path, options)
        self._correct_for_path(file, "Plugins")
        self.remove_from_pbx_file_reference_section(file)
        self.remove_from_plugins_pbx_group(file)
        return file

    def add_product_file(self, target_path: str, options: Optional[FileOptions] = None) -> FileDescriptor:
        options = options or FileOptions()
        file = describe(target_path, options)
        file.include_in_index = 0
        file.file_ref = self.generate_uuid()
        file.target = options.target
        self._place_product(file, options)
        file.uuid = self.generate_uuid()
        self.add_to_pbx_file_reference_section(file)
        self.add_to_products_pbx_group(file)
        return file

    @staticmethod
    def _place_product(file: FileDescriptor, options: FileOptions) -> None:
        # products live at their own name, in the group given by the caller
        if isinstance(file, ExplicitTypeFile):
            file.product_path = file.basename
            file.product_group = options.group
        elif isinstance(file, InferredTypeFile):
            file.path = file.basename
            if options.group:
                file.group = options.group
        else:
            raise TypeError(f"Unsupported file descriptor: {type(file).__name__}")

    def remove_product_file(self, path: str, options: Optional[FileOptions] = None) -> FileDescriptor:
        options = options or FileOptions()
        file = describe(path, options)
        self._place_product(file, options)
        self.remove_from_pbx_file_reference_section(file)
        self.remove_from_products_pbx_group(file)
        return file

    def add_source_file(
        self, path: str, options: Optional[FileOptions] = None, group: Optional[str] = None
    ) -> Optional[FileDescriptor]:
        """
        Track a compiled source file.

        The file is placed in `group` (a group or variant group key) when
        given, otherwise in the Plugins group. Returns None when the path is
        already tracked.

        Raises:
            BuildPhaseNotFoundError: If the target has no Sources phase.
        """
        options = options or FileOptions()
        self._require_phase("PBXSourcesBuildPhase", "Sources", options.target)
        file = self.add_file(path, group, options) if group else self.add_plugin_file(path, options)
        if file is None:
            return None
        file.target = options.target
        file.uuid = self.generate_uuid()
        self.add_to_pbx_build_file_section(file)
        self.add_to_pbx_sources_build_phase(file)
        return file

    def remove_source_file(
        self, path: str, options: Optional[FileOptions] = None, group: Optional[str] = None
    ) -> FileDescriptor:
        options = options or FileOptions()
        file = self.remove_file(path, group, options) if group else self.remove_plugin_file(path, options)
        file.target = options.target
        self.remove_from_pbx_build_file_section(file, self.pbx_sources_build_phase_obj(file.target))
        self.remove_from_pbx_sources_build_phase(file)
        return file

    def add_header_file(
        self, path: str, options: Optional[FileOptions] = None, group: Optional[str] = None
    ) -> Optional[FileDescriptor]:
        if group:
            return self.add_file(path, group, options)
        return self.add_plugin_file(path, options)

    def remove_header_file(
        self, path: str, options: Optional[FileOptions] = None, group: Optional[str] = None
    ) -> FileDescriptor:
        if group:
            return self.remove_file(path, group, options)
        return self.remove_plugin_file(path, options)

    def add_resource_file(
        self, path: str, options: Optional[FileOptions] = None, group: Optional[str] = None
    ) -> Optional[FileDescriptor]:
        """
        Track a resource copied into the product.

        With `plugin` the file is placed in the Plugins group; with
        `variant_group` it is only referenced, not copied. Returns None when
        the path is already tracked.
        """
        options = options or FileOptions()
        group_type = self.group_type(group) if group else None
        if not options.variant_group:
            self._require_phase("PBXResourcesBuildPhase", "Resources", options.target)

        if options.plugin:
            file = self.add_plugin_file(path, options)
            if file is None:
                return None
        else:
            file = describe(path, options)
            if self.has_file(file_path(file)):
                logger.debug("%s is already tracked", path)
                return None

        file.uuid = self.generate_uuid()
        file.target = options.target

        if not options.plugin:
            self._correct_for_path(file, "Resources")
            file.file_ref = self.generate_uuid()

        if not options.variant_group:
            self.add_to_pbx_build_file_section(file)
            self.add_to_pbx_resources_build_phase(file)

        if not options.plugin:
            self.add_to_pbx_file_reference_section(file)
            if group_type:
                self.add_to_pbx_group_type(file, group, group_type)
            else:
                self.add_to_resources_pbx_group(file)

        return file

    def remove_resource_file(
        self, path: str, options: Optional[FileOptions] = None, group: Optional[str] = None
    ) -> FileDescriptor:
        options = options or FileOptions()
        file = describe(path, options)
        file.target = options.target
        self._correct_for_path(file, "Resources")

        self.remove_from_pbx_file_reference_section(file)
        self.remove_from_pbx_build_file_section(file, self.pbx_resources_build_phase_obj(file.target))
        if group:
            if self.get_pbx_group_by_key(group):
                self.remove_from_pbx_group(file, group)
            elif self.get_pbx_variant_group_by_key(group):
                self.remove_from_pbx_variant_group(file, group)
        else:
            self.remove_from_resources_pbx_group(file)
        self.remove_from_pbx_resources_build_phase(file)
        return file

    def add_framework(self, path: str, options: Optional[FileOptions] = None) -> Optional[FileDescriptor]:
        """
        Track a framework and link it into the target.

        A custom framework also gets a framework search path entry; with
        `embed` it gets a second build file in the Embed Frameworks phase,
        sharing the same file reference, and that build file is returned.
        """
        options = options or FileOptions()
        if options.link:
            self._require_phase("PBXFrameworksBuildPhase", "Frameworks", options.target)

        file = describe(path, replace(options, embed=False))
        if self.has_file(file_path(file)):
            logger.debug("%s is already tracked", path)
            return None

        file.uuid = self.generate_uuid()
        file.file_ref = self.generate_uuid()
        file.target = options.target

        self.add_to_pbx_build_file_section(file)
        self.add_to_pbx_file_reference_section(file)
        self.add_to_frameworks_pbx_group(file)

        if options.link:
            self.add_to_pbx_frameworks_build_phase(file)

        if options.custom_framework:
            self.add_to_framework_search_paths(file)

            if options.embed:
                embedded_file = describe(path, options)
                embedded_file.uuid = self.generate_uuid()
                embedded_file.file_ref = file.file_ref
                embedded_file.target = options.target

                # separate PBXBuildFile for the Embed Frameworks phase
                self.add_to_pbx_build_file_section(embedded_file)
                self.add_to_pbx_embed_frameworks_build_phase(embedded_file)
                return embedded_file

        return file

    def remove_framework(self, path: str, options: Optional[FileOptions] = None) -> FileDescriptor:
        options = options or FileOptions()
        file = describe(path, replace(options, embed=False))
        file.target = options.target

        self.remove_from_pbx_file_reference_section(file)
        self.remove_from_pbx_build_file_section(file, self.pbx_frameworks_build_phase_obj(file.target))
        self.remove_from_frameworks_pbx_group(file)
        self.remove_from_pbx_frameworks_build_phase(file)

        if options.custom_framework:
            self.remove_from_framework_search_paths(file)

            # only custom frameworks get a second build file for embedding
            embedded_file = describe(path, replace(options, embed=True))
            embedded_file.file_ref = file.file_ref
            embedded_file.target = options.target

            self.remove_from_pbx_build_file_section(
                embedded_file, self.pbx_embed_frameworks_build_phase_obj(embedded_file.target)
            )
            self.remove_from_pbx_embed_frameworks_build_phase(embedded_file)

        return file

    def add_copyfile(self, path: str, options: Optional[FileOptions] = None) -> FileDescriptor:
        options = options or FileOptions()
        self._require_phase("PBXCopyFilesBuildPhase", COPY_FILES, options.target)
        file = describe(path, options)

        existing_key = self._file_reference_key(file_path(file))
        file.file_ref = existing_key or self.generate_uuid()
        file.uuid = self.generate_uuid()
        file.target = options.target

        self.add_to_pbx_build_file_section(file)
        if existing_key is None:
            self.add_to_pbx_file_reference_section(file)
        self.add_to_pbx_copyfiles_build_phase(file)
        return file

    def remove_copyfile(self, path: str, options: Optional[FileOptions] = None) -> FileDescriptor:
        options = options or FileOptions()
        file = describe(path, options)
        file.target = options.target

        self.remove_from_pbx_file_reference_section(file)
        self.remove_from_pbx_build_file_section(file, self.pbx_copyfiles_build_phase_obj(file.target))
        self.remove_from_pbx_copyfiles_build_phase(file)
        return file

    def add_static_library(self, path: str, options: Optional[FileOptions] = None) -> Optional[FileDescriptor]:
        options = options or FileOptions()
        self._require_phase("PBXFrameworksBuildPhase", "Frameworks", options.target)

        if options.plugin:
            file = self.add_plugin_file(path, options)
            if file is None:
                return None
        else:
            file = describe(path, options)
            if self.has_file(file_path(file)):
                logger.debug("%s is already tracked", path)
                return None

        file.uuid = self.generate_uuid()
        file.target = options.target

        if not options.plugin:
            file.file_ref = self.generate_uuid()
            self.add_to_pbx_file_reference_section(file)

        self.add_to_pbx_build_file_section(file)
        self.add_to_pbx_frameworks_build_phase(file)
        self.add_to_library_search_paths(file)
        return file

    def add_file(
        self, path: str, group: Optional[str], options: Optional[FileOptions] = None
    ) -> Optional[FileDescriptor]:
        group_type = self.group_type(group)
        file = describe(path, options)
        if self.has_file(file_path(file)):
            logger.debug("%s is already tracked", path)
            return None

        file.file_ref = self.generate_uuid()
        self.add_to_pbx_file_reference_section(file)
        self.add_to_pbx_group_type(file, group, group_type)
        return file

    def remove_file(
        self, path: str, group: Optional[str], options: Optional[FileOptions] = None
    ) -> FileDescriptor:
        file = describe(path, options)
        self.remove_from_pbx_file_reference_section(file)

        if self.get_pbx_group_by_key(group):
            self.remove_from_pbx_group(file, group)
        elif self.get_pbx_variant_group_by_key(group):
            self.remove_from_pbx_variant_group(file, group)
        return file

    def add_data_model_document(
        self, path: str, group: Optional[str] = None, options: Optional[FileOptions] = None
    ) -> Optional[InferredTypeFile]:
        """
        Track a Core Data model bundle (.xcdatamodeld).

        Every model version found in the bundle directory gets a file
        reference; the version named in `.xccurrentversion` (or the first
        one) becomes the current version of the XCVersionGroup.
        """
        options = options or FileOptions()
        group_key = group or "Resources"
        if self.get_pbx_group_by_key(group_key) is None:
            group_key = self.find_pbx_group_key(name=group_key)
            if group_key is None:
                raise InvalidGroupError(group or "Resources")

        file = describe(path, options)
        if not isinstance(file, InferredTypeFile):
            raise MalformedPreconditionError(f"{path} is not a data model document")
        if self.has_file(file.path) or self._version_group_key(file.path) is not None:
            logger.debug("%s is already tracked", path)
            return None

        entries = sorted(os.listdir(path))
        if not [name for name in entries if name != ".xccurrentversion"]:
            raise MalformedPreconditionError(f"{path} contains no model versions")
        self._require_phase("PBXSourcesBuildPhase", "Sources", options.target)

        file.file_ref = self.generate_uuid()
        self.add_to_pbx_group(file, group_key)

        file.target = options.target
        file.uuid = self.generate_uuid()
        self.add_to_pbx_build_file_section(file)
        self.add_to_pbx_sources_build_phase(file)

        current_version_name = None
        for name in entries:
            if name == ".xccurrentversion":
                with open(os.path.join(path, name), "rb") as f:
                    current_version_name = plistlib.load(f).get("_XCCurrentVersionName")
                continue
            model = describe(posixpath.join(path.replace("\\", "/"), name))
            model.file_ref = self.generate_uuid()
            self.add_to_pbx_file_reference_section(model)
            file.models.append(model)

        for model in file.models:
            if current_version_name and model.basename == current_version_name:
                file.current_model = model
        if file.current_model is None:
            file.current_model = file.models[0]

        self.add_to_xc_version_group_section(file)
        return file

    # ------------------------------------------------------------------
    # Build phases, configurations, targets

    def add_build_phase(
        self,
        file_paths: List[str],
        isa: str,
        comment: str,
        target: Optional[str] = None,
        options_or_folder_type: Union[ShellScriptOptions, str, None] = None,
        subfolder_path: Optional[str] = None,
    ) -> ObjectEntry:
        """
        Create a build phase in a target (the first target by default).

        Args:
            file_paths: Files the phase starts with. Paths with a build file
                reuse it; other paths get a new file reference and build file.
            isa: Phase type, e.g. PBXCopyFilesBuildPhase.
            comment: Phase name.
            target: Target identifier.
            options_or_folder_type: Target type name deciding where a copy
                files phase copies to, or ShellScriptOptions for a script
                phase.
            subfolder_path: Destination path of a copy files phase.
        """
        target_uuid = target or self.get_first_target().uuid
        native = self.find_section("PBXNativeTarget")
        if native is None or target_uuid not in native:
            raise InvalidTargetError(target_uuid)

        phase: Dict[str, Any] = {
            "isa": isa,
            "buildActionMask": 2147483647,
            "files": [],
            "runOnlyForDeploymentPostprocessing": 0,
        }
        if isa == "PBXCopyFilesBuildPhase":
            folder_type = options_or_folder_type if isinstance(options_or_folder_type, str) else None
            copy_files_phase_fields(phase, folder_type, subfolder_path, comment)
        elif isa == "PBXShellScriptBuildPhase":
            if not isinstance(options_or_folder_type, ShellScriptOptions):
                raise InvalidArgumentError("Shell script phases need ShellScriptOptions")
            shell_script_phase_fields(phase, options_or_folder_type, comment)
        phase = xcode_ordered(phase)

        phase_uuid = self.generate_uuid()
        self.objects_section(isa).add(phase_uuid, phase, comment)
        native[target_uuid].setdefault("buildPhases", []).append(Reference(phase_uuid, comment))

        build_files: Dict[str, Reference] = {}
        file_references = self.find_section("PBXFileReference") or Section()
        for key, record in (self.find_section("PBXBuildFile") or Section()).items():
            reference = file_references.get(ref_id(record.get("fileRef")))
            if reference is None or reference.get("path") is None:
                continue
            tracked = describe(unquote(reference["path"]))
            build_files[unquote(reference["path"])] = Reference(
                key, f"{tracked.basename} in {file_group(tracked)}"
            )

        for path in file_paths:
            existing = build_files.get(unquote(path))
            if existing is not None:
                phase["files"].append(Reference(existing.id, existing.comment))
                continue
            file = describe(path)
            file.uuid = self.generate_uuid()
            file.file_ref = self.generate_uuid()
            self.add_to_pbx_file_reference_section(file)
            self.add_to_pbx_build_file_section(file)
            phase["files"].append(phase_entry(file))

        logger.debug("added %s %s (%s) to %s", isa, comment, phase_uuid, target_uuid)
        return ObjectEntry(phase_uuid, phase)

    def add_xc_configuration_list(
        self, configurations: List[Dict[str, Any]], default_name: str, comment: str
    ) -> ObjectEntry:
        configuration_section = self.pbx_xc_build_configuration_section()
        configuration_list: Dict[str, Any] = {
            "isa": "XCConfigurationList",
            "buildConfigurations": [],
            "defaultConfigurationIsVisible": 0,
            "defaultConfigurationName": default_name,
        }
        for configuration in configurations:
            configuration_uuid = self.generate_uuid()
            name = unquote(configuration.get("name"))
            configuration_section.add(
                configuration_uuid, xcode_ordered({"isa": "XCBuildConfiguration", **configuration}), name
            )
            configuration_list["buildConfigurations"].append(Reference(configuration_uuid, name))

        list_uuid = self.generate_uuid()
        self.pbx_xc_configuration_list().add(list_uuid, configuration_list, comment)
        return ObjectEntry(list_uuid, configuration_list)

    def add_target_dependency(self, target: Optional[str], dependency_targets: List[str]) -> Optional[ObjectEntry]:
        """
        Make `target` depend on each of `dependency_targets`.

        Raises:
            InvalidTargetError: If any identifier is not a native target.
        """
        if not target:
            return None
        native = self.find_section("PBXNativeTarget")
        if native is None or target not in native:
            raise InvalidTargetError(target)
        for dependency in dependency_targets:
            if dependency not in native:
                raise InvalidTargetError(dependency)

        root_object = self._document().project.get("rootObject")
        container_portal = (
            Reference(root_object.id, root_object.comment)
            if isinstance(root_object, Reference)
            else root_object
        )
        proxy_section = self.objects_section("PBXContainerItemProxy")
        dependency_section = self.objects_section("PBXTargetDependency")

        for dependency in dependency_targets:
            proxy_uuid = self.generate_uuid()
            proxy_section.add(
                proxy_uuid,
                {
                    "isa": "PBXContainerItemProxy",
                    "containerPortal": container_portal,
                    "proxyType": ProxyType.TARGET_DEPENDENCY.value,
                    "remoteGlobalIDString": dependency,
                    "remoteInfo": quote_if_needed(unquote(native[dependency].get("name"))),
                },
                "PBXContainerItemProxy",
            )
            dependency_uuid = self.generate_uuid()
            dependency_section.add(
                dependency_uuid,
                {
                    "isa": "PBXTargetDependency",
                    "target": Reference(dependency, native.comment(dependency)),
                    "targetProxy": Reference(proxy_uuid, "PBXContainerItemProxy"),
                },
                "PBXTargetDependency",
            )
            native[target].setdefault("dependencies", []).append(
                Reference(dependency_uuid, "PBXTargetDependency")
            )
            logger.debug("target %s now depends on %s", target, dependency)

        return ObjectEntry(target, native[target])

    def add_target(
        self,
        name: str,
        kind: Union[TargetType, str, None],
        subfolder: Optional[str] = None,
        bundle_id: Optional[str] = None,
    ) -> ObjectEntry:
        """
        Create a native target with Debug and Release configurations and a
        product reference.

        The project's first target is made to depend on the new target; a
        watch2_extension target is instead made a dependency of the watch app
        target. App extensions and watch content are also embedded into the
        target that hosts them.

        Raises:
            InvalidArgumentError: If the name is empty or the type is missing
                or unknown.
        """
        target_name = (name or "").strip()
        if not target_name:
            raise InvalidArgumentError("Target name missing.")
        if not kind:
            raise InvalidArgumentError("Target type missing.")
        target_type = kind if isinstance(kind, TargetType) else TargetType.parse(kind)
        if target_type is None:
            raise InvalidArgumentError(f"Target type invalid: {kind}")

        existing_targets = self.get_first_project().obj.get("targets") or []
        if target_type in (TargetType.APP_EXTENSION, TargetType.WATCH2_APP) and not existing_targets:
            raise MalformedPreconditionError(f"A {target_type.value} target needs a host target")

        target_subfolder = subfolder or target_name
        info_plist = quote(posixpath.join(target_subfolder, f"{target_subfolder}-Info.plist"))
        release_settings: Dict[str, Any] = {
            "INFOPLIST_FILE": info_plist,
            "LD_RUNPATH_SEARCH_PATHS": LD_RUNPATH_SEARCH_PATHS,
            "PRODUCT_NAME": quote(target_name),
            "SKIP_INSTALL": "YES",
        }
        debug_settings: Dict[str, Any] = {
            "GCC_PREPROCESSOR_DEFINITIONS": ['"DEBUG=1"', INHERITED],
            **release_settings,
        }
        if bundle_id:
            debug_settings["PRODUCT_BUNDLE_IDENTIFIER"] = quote(bundle_id)
            release_settings["PRODUCT_BUNDLE_IDENTIFIER"] = quote(bundle_id)

        configuration_list_comment = f'Build configuration list for PBXNativeTarget "{target_name}"'
        configuration_list = self.add_xc_configuration_list(
            [
                {"name": "Debug", "buildSettings": debug_settings},
                {"name": "Release", "buildSettings": release_settings},
            ],
            "Release",
            configuration_list_comment,
        )

        target_uuid = self.generate_uuid()
        product_type = PRODUCTTYPE_BY_TARGETTYPE[target_type]
        product_file = self.add_product_file(
            target_name,
            FileOptions(
                group=COPY_FILES,
                target=target_uuid,
                explicit_file_type=FILETYPE_BY_PRODUCTTYPE[product_type],
            ),
        )
        self.add_to_pbx_build_file_section(product_file)

        target = xcode_ordered(
            {
                "isa": "PBXNativeTarget",
                "name": quote(target_name),
                "productName": quote(target_name),
                "productReference": Reference(product_file.file_ref, product_file.basename),
                "productType": quote(product_type.value),
                "buildConfigurationList": Reference(configuration_list.uuid, configuration_list_comment),
                "buildPhases": [],
                "buildRules": [],
                "dependencies": [],
            }
        )
        self.add_to_pbx_native_target_section(target_uuid, target)

        if target_type == TargetType.APP_EXTENSION:
            phase = self.add_build_phase(
                [], "PBXCopyFilesBuildPhase", COPY_FILES, self.get_first_target().uuid, target_type.value
            )
            phase.obj["files"].append(phase_entry(product_file))
        elif target_type == TargetType.WATCH2_APP:
            self.add_build_phase(
                [f"{target_name}.app"],
                "PBXCopyFilesBuildPhase",
                "Embed Watch Content",
                self.get_first_target().uuid,
                target_type.value,
                '"$(CONTENTS_FOLDER_PATH)/Watch"',
            )
        elif target_type == TargetType.WATCH2_EXTENSION:
            watch2_target = self.get_target(ProductType.WATCH2_APP)
            if watch2_target is not None:
                self.add_build_phase(
                    [f"{target_name}.appex"],
                    "PBXCopyFilesBuildPhase",
                    "Embed App Extensions",
                    watch2_target.uuid,
                    target_type.value,
                )

        self.add_to_pbx_project_section(target_uuid, target)

        if target_type == TargetType.WATCH2_EXTENSION:
            watch2_target = self.get_target(ProductType.WATCH2_APP)
            if watch2_target is not None:
                self.add_target_dependency(watch2_target.uuid, [target_uuid])
        else:
            first_target = self.get_first_target()
            if first_target.uuid != target_uuid:
                self.add_target_dependency(first_target.uuid, [target_uuid])

        logger.debug("added %s target %s (%s)", target_type.value, target_name, target_uuid)
        return ObjectEntry(target_uuid, target)

    def remove_target(self, name_or_uuid: str) -> ObjectEntry:
        """
        Remove a native target and every record that only exists for it.

        The target's phases and their build files, its configurations, its
        product, the dependencies and proxies pointing at it and its
        TargetAttributes entry all go. Files the phases referenced stay
        tracked.

        Raises:
            InvalidTargetError: If no native target has that identifier or name.
        """
        native = self.find_section("PBXNativeTarget")
        uuid = name_or_uuid if native is not None and name_or_uuid in native else self.find_target_key(name_or_uuid)
        if native is None or uuid is None:
            raise InvalidTargetError(name_or_uuid)
        target = native[uuid]
        removed: Set[str] = {uuid}

        # phases and their build files
        for phase_ref in target.get("buildPhases") or []:
            phase_id = ref_id(phase_ref)
            found = self._find_record(phase_id)
            if found is None:
                continue
            section, phase = found
            for entry in phase.get("files") or []:
                removed |= self._delete_record(ref_id(entry))
            del section[phase_id]
            removed.add(phase_id)

        # configurations
        list_id = ref_id(target.get("buildConfigurationList"))
        found = self._find_record(list_id)
        if found is not None:
            section, configuration_list = found
            for entry in configuration_list.get("buildConfigurations") or []:
                removed |= self._delete_record(ref_id(entry))
            del section[list_id]
            removed.add(list_id)

        # product and the build files pointing at it
        product_id = ref_id(target.get("productReference"))
        if product_id is not None:
            removed |= self._delete_record(product_id)
            build_files = self.find_section("PBXBuildFile") or Section()
            for key, record in list(build_files.items()):
                if ref_id(record.get("fileRef")) == product_id:
                    del build_files[key]
                    removed.add(key)

        # dependencies in both directions and their proxies
        for key, record in list((self.find_section("PBXTargetDependency") or Section()).items()):
            own = key in {ref_id(entry) for entry in target.get("dependencies") or []}
            if own or ref_id(record.get("target")) == uuid:
                removed |= self._delete_record(ref_id(record.get("targetProxy")))
                removed |= self._delete_record(key)
        root_object = ref_id(self._document().project.get("rootObject"))
        for key, record in list((self.find_section("PBXContainerItemProxy") or Section()).items()):
            if record.get("remoteGlobalIDString") == uuid and ref_id(record.get("containerPortal")) == root_object:
                removed |= self._delete_record(key)

        for project in (self.find_section("PBXProject") or Section()).values():
            attributes = (project.get("attributes") or {}).get("TargetAttributes")
            if isinstance(attributes, dict):
                attributes.pop(uuid, None)

        del native[uuid]
        self._scrub_references(
            {"targets", "files", "children", "dependencies", "buildPhases"}, removed
        )
        logger.debug("removed target %s (%s)", unquote(target.get("name")), uuid)
        return ObjectEntry(uuid, target)

    def _find_record(self, key: Optional[str]) -> Optional[Tuple[Section, Dict[str, Any]]]:
        if key is None:
            return None
        for section in self.objects.values():
            if key in section:
                return section, section[key]
        return None

    def _delete_record(self, key: Optional[str]) -> Set[str]:
        found = self._find_record(key)
        if found is None:
            return set()
        del found[0][key]
        return {key}

    def _scrub_references(self, fields: Set[str], ids: Set[str]) -> None:
        for section in self.objects.values():
            for record in section.values():
                for field_name in fields:
                    entries = record.get(field_name)
                    if isinstance(entries, list):
                        record[field_name] = [entry for entry in entries if ref_id(entry) not in ids]

    # ------------------------------------------------------------------
    # Build settings

    def _configurations(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        yield from (self.find_section("XCBuildConfiguration") or Section()).items()

    def _target_configuration_ids(self, target_name: str) -> Set[str]:
        target = self.pbx_target_by_name(target_name)
        list_id = ref_id(target.get("buildConfigurationList")) if target else None
        configuration_list = (self.find_section("XCConfigurationList") or Section()).get(list_id)
        if configuration_list is None:
            return set()
        return {ref_id(entry) for entry in configuration_list.get("buildConfigurations") or []}

    def _matching_configurations(
        self, build: Optional[str], target_name: Optional[str]
    ) -> Iterator[Tuple[str, Dict[str, Any]]]:
        valid = self._target_configuration_ids(target_name) if target_name else None
        for key, config in self._configurations():
            if valid is not None and key not in valid:
                continue
            if build and not same_value(config.get("name"), build):
                continue
            yield key, config

    def add_build_property(self, prop: str, value: Any, build_name: Optional[str] = None) -> None:
        for _, config in self._matching_configurations(build_name, None):
            config.setdefault("buildSettings", {})[prop] = value

    def remove_build_property(self, prop: str, build_name: Optional[str] = None) -> None:
        for _, config in self._matching_configurations(build_name, None):
            config.get("buildSettings", {}).pop(prop, None)

    def update_build_property(
        self, prop: str, value: Any, build: Optional[str] = None, target_name: Optional[str] = None
    ) -> None:
        for key, config in self._matching_configurations(build, target_name):
            config.setdefault("buildSettings", {})[prop] = value
            logger.debug("set %s in configuration %s", prop, key)

    def get_build_property(
        self, prop: str, build: Optional[str] = None, target_name: Optional[str] = None
    ) -> Any:
        result = None
        for _, config in self._matching_configurations(build, target_name):
            value = config.get("buildSettings", {}).get(prop)
            if value is not None:
                result = value
        return result

    def update_product_name(self, name: str) -> None:
        self.update_build_property("PRODUCT_NAME", quote(name))

    def get_build_config_by_name(self, name: str) -> Dict[str, Dict[str, Any]]:
        return {key: config for key, config in self._configurations() if same_value(config.get("name"), name)}

    def add_to_build_settings(self, build_setting: str, value: Any) -> None:
        for _, config in self._configurations():
            config.setdefault("buildSettings", {})[build_setting] = value

    def remove_from_build_settings(self, build_setting: str) -> None:
        for _, config in self._configurations():
            config.get("buildSettings", {}).pop(build_setting, None)

    def _product_build_settings(self) -> Iterator[Dict[str, Any]]:
        product_name = self.product_name
        for _, config in self._configurations():
            build_settings = config.get("buildSettings", {})
            if unquote(build_settings.get("PRODUCT_NAME")) == product_name:
                yield build_settings

    def _search_path_for_file(self, file: PbxFile) -> str:
        plugins = self.pbx_group_by_name("Plugins")
        return search_path_for_file(file, plugins.get("path") if plugins else None, self.product_name)

    def _add_search_path(self, setting: str, entry: str) -> None:
        for build_settings in self._product_build_settings():
            current = build_settings.get(setting)
            if not current or current == INHERITED:
                build_settings[setting] = [INHERITED]
            elif not isinstance(current, list):
                build_settings[setting] = [current]
            build_settings[setting].append(entry)

    def _remove_search_path(self, setting: str, needle: str) -> None:
        for build_settings in self._product_build_settings():
            current = build_settings.get(setting)
            if isinstance(current, list):
                build_settings[setting] = [
                    entry for entry in current if not (isinstance(entry, str) and needle in entry)
                ]

    def add_to_framework_search_paths(self, file: PbxFile) -> None:
        self._add_search_path("FRAMEWORK_SEARCH_PATHS", self._search_path_for_file(file))

    def remove_from_framework_search_paths(self, file: PbxFile) -> None:
        self._remove_search_path("FRAMEWORK_SEARCH_PATHS", self._search_path_for_file(file))

    def add_to_library_search_paths(self, file: Union[PbxFile, str]) -> None:
        entry = file if isinstance(file, str) else self._search_path_for_file(file)
        self._add_search_path("LIBRARY_SEARCH_PATHS", entry)

    def remove_from_library_search_paths(self, file: PbxFile) -> None:
        self._remove_search_path("LIBRARY_SEARCH_PATHS", self._search_path_for_file(file))

    def add_to_header_search_paths(self, file: Union[PbxFile, str]) -> None:
        entry = file if isinstance(file, str) else self._search_path_for_file(file)
        self._add_search_path("HEADER_SEARCH_PATHS", entry)

    def remove_from_header_search_paths(self, file: PbxFile) -> None:
        self._remove_search_path("HEADER_SEARCH_PATHS", self._search_path_for_file(file))

    def add_to_other_linker_flags(self, flag: str) -> None:
        self._add_search_path("OTHER_LDFLAGS", flag)

    def remove_from_other_linker_flags(self, flag: str) -> None:
        self._remove_search_path("OTHER_LDFLAGS", flag)

    # ------------------------------------------------------------------
    # Regions and target attributes

    def _known_regions(self) -> Optional[List[str]]:
        return self.get_first_project().obj.get("knownRegions")

    def add_known_region(self, name: str) -> None:
        project = self.get_first_project().obj
        project.setdefault("knownRegions", [])
        if not self.has_known_region(name):
            project["knownRegions"].append(quote_if_needed(name))

    def remove_known_region(self, name: str) -> None:
        regions = self._known_regions()
        if regions:
            for index, region in enumerate(regions):
                if same_value(region, name):
                    del regions[index]
                    break

    def has_known_region(self, name: str) -> bool:
        return any(same_value(region, name) for region in self._known_regions() or [])

    def add_target_attribute(self, prop: str, value: Any, target: Optional[ObjectEntry] = None) -> None:
        attributes = self.get_first_project().obj.setdefault("attributes", {})
        target = target or self.get_first_target()
        target_attributes = attributes.setdefault("TargetAttributes", {})
        target_attributes.setdefault(target.uuid, {})[prop] = value

    def remove_target_attribute(self, prop: str, target: Optional[ObjectEntry] = None) -> None:
        attributes = self.get_first_project().obj.get("attributes") or {}
        target = target or self.get_first_target()
        target_attributes = attributes.get("TargetAttributes") or {}
        if target.uuid in target_attributes:
            target_attributes[target.uuid].pop(prop, None)
