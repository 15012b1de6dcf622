# Record constructors.
#
# Helpers that turn file descriptors into the records stored in the object
# graph, plus the labels Xcode writes next to the identifiers pointing at them.

import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pbxgraph.file import (
    ExplicitTypeFile,
    FileDescriptor,
    InferredTypeFile,
    LocalizationGroup,
    PbxFile,
    PhaseMember,
    file_group,
    file_path,
)
from pbxgraph.model import DESTINATION_BY_FOLDER_TYPE, Reference
from pbxgraph.utils import quote, quote_if_needed, unquote


@dataclass
class ShellScriptOptions:
    shell_script: str
    shell_path: str = "/bin/sh"
    input_paths: List[str] = field(default_factory=list)
    output_paths: List[str] = field(default_factory=list)


def long_comment(file: PhaseMember) -> str:
    return f"{file.basename} in {file_group(file)}"


def file_reference_comment(file: FileDescriptor) -> str:
    return file.basename or posixpath.basename(file_path(file) or "")


def build_file_record(file: PhaseMember) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "isa": "PBXBuildFile",
        "fileRef": Reference(file.file_ref, file.basename),
    }
    if isinstance(file, PbxFile) and file.settings:
        record["settings"] = file.settings
    return record


def file_reference_record(file: FileDescriptor) -> Dict[str, Any]:
    """
    Build the PBXFileReference record for a descriptor.

    Keys follow the order Xcode writes them in: isa first, the rest sorted.
    `name` is only written when it differs from the path.
    """
    record: Dict[str, Any] = {"isa": "PBXFileReference"}
    if isinstance(file, ExplicitTypeFile):
        path = file.product_path or file.basename
        record["explicitFileType"] = quote_if_needed(unquote(file.explicit_file_type))
        record["includeInIndex"] = file.include_in_index
    elif isinstance(file, InferredTypeFile):
        path = file.path
        if file.file_encoding is not None:
            record["fileEncoding"] = file.file_encoding
        record["lastKnownFileType"] = quote_if_needed(unquote(file.last_known_file_type))
    else:
        raise TypeError(f"Unsupported file descriptor: {type(file).__name__}")
    if file.basename != path:
        record["name"] = quote_if_needed(file.basename)
    record["path"] = quote_if_needed(path)
    record["sourceTree"] = quote_if_needed(unquote(file.source_tree))
    return record


def group_child(file: PhaseMember) -> Reference:
    return Reference(file.file_ref, file.basename)


def phase_entry(file: PhaseMember) -> Reference:
    return Reference(file.uuid, long_comment(file))


def copy_files_phase_fields(
    record: Dict[str, Any],
    folder_type: Optional[str],
    subfolder_path: Optional[str],
    phase_name: str,
) -> Dict[str, Any]:
    destination = DESTINATION_BY_FOLDER_TYPE.get(folder_type or "")
    record["dstPath"] = subfolder_path or '""'
    if destination is not None:
        record["dstSubfolderSpec"] = destination.value
    record["name"] = quote(phase_name)
    return record


def shell_script_phase_fields(
    record: Dict[str, Any], options: ShellScriptOptions, phase_name: str
) -> Dict[str, Any]:
    record["inputPaths"] = list(options.input_paths)
    record["name"] = quote(phase_name)
    record["outputPaths"] = list(options.output_paths)
    record["shellPath"] = options.shell_path
    record["shellScript"] = quote(options.shell_script.replace('"', '\\"'))
    return record


def search_path_for_file(
    file: PbxFile, plugins_path: Optional[str], product_name: Optional[str]
) -> str:
    """
    The search path entry that makes a file's directory visible to the build.

    Plugins resolve to the Plugins group path, custom frameworks to their own
    directory, everything else to its directory under the product folder.
    """
    path = file_path(file) if isinstance(file, (InferredTypeFile, ExplicitTypeFile)) else None
    file_dir = posixpath.dirname(path or "")
    file_dir = f"/{file_dir}" if file_dir and file_dir != "." else ""
    if file.plugin and plugins_path:
        return f'"\\"$(SRCROOT)/{unquote(plugins_path)}\\""'
    if file.custom_framework and file.dirname:
        return f'"\\"{file.dirname}\\""'
    return f'"\\"$(SRCROOT)/{product_name}{file_dir}\\""'


def localization_group(uuid: str, file_ref: str, name: str) -> LocalizationGroup:
    return LocalizationGroup(uuid=uuid, file_ref=file_ref, basename=name)


def xcode_ordered(record: Dict[str, Any]) -> Dict[str, Any]:
    # isa first, then keys in the sorted order Xcode writes them in
    ordered = {"isa": record["isa"]} if "isa" in record else {}
    for key in sorted(k for k in record if k != "isa"):
        ordered[key] = record[key]
    return ordered


def ref_id(value: Any) -> Optional[str]:
    if isinstance(value, Reference):
        return value.id
    if isinstance(value, str):
        return value
    return None
