# File descriptors.
#
# A descriptor is what every file operation builds before it touches the
# object graph: the display name, where the file lives, its content type and
# which build phase group it belongs to. Inferred-type descriptors describe
# files on disk; explicit-type descriptors describe build products and carry
# no path, inferred type, group or encoding of their own.

import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from pbxgraph.model import (
    DEFAULT_FILETYPE,
    DEFAULT_GROUP,
    DEFAULT_PRODUCT_SOURCETREE,
    DEFAULT_SOURCETREE,
    ENCODING_BY_FILETYPE,
    FILETYPE_BY_EXTENSION,
    GROUP_BY_FILETYPE,
    PATH_BY_FILETYPE,
    SOURCETREE_BY_FILETYPE,
    FileType,
)
from pbxgraph.utils import quote, unquote


@dataclass
class FileOptions:
    explicit_file_type: Optional[str] = None
    last_known_file_type: Optional[str] = None
    source_tree: Optional[str] = None
    custom_framework: bool = False
    embed: bool = False
    weak: bool = False
    sign: bool = False
    compiler_flags: Optional[str] = None
    default_encoding: Optional[int] = None
    # operation-level options
    target: Optional[str] = None
    group: Optional[str] = None
    plugin: bool = False
    variant_group: bool = False
    link: bool = True


@dataclass
class PbxFile:
    basename: str
    source_tree: str = DEFAULT_SOURCETREE
    include_in_index: int = 0
    settings: Optional[Dict[str, Any]] = None
    custom_framework: bool = False
    dirname: Optional[str] = None
    # Filled in by the project while the file is being added
    uuid: Optional[str] = None
    file_ref: Optional[str] = None
    target: Optional[str] = None
    plugin: bool = False
    models: List["PbxFile"] = field(default_factory=list)
    current_model: Optional["PbxFile"] = None


@dataclass
class InferredTypeFile(PbxFile):
    path: str = ""
    last_known_file_type: str = DEFAULT_FILETYPE
    group: str = DEFAULT_GROUP
    file_encoding: Optional[int] = None
    default_encoding: Optional[int] = None


@dataclass
class ExplicitTypeFile(PbxFile):
    explicit_file_type: str = ""
    # Set only once the product is registered in a project
    product_path: Optional[str] = None
    product_group: Optional[str] = None


# A variant group taking part in a build phase like a file would
@dataclass
class LocalizationGroup:
    uuid: str
    file_ref: str
    basename: str
    target: Optional[str] = None
    group: str = "Resources"


FileDescriptor = Union[InferredTypeFile, ExplicitTypeFile]
PhaseMember = Union[InferredTypeFile, ExplicitTypeFile, LocalizationGroup]


def _extension(path: str) -> str:
    return posixpath.splitext(path)[1][1:]


def detect_type(path: str) -> str:
    return FILETYPE_BY_EXTENSION.get(unquote(_extension(path)), DEFAULT_FILETYPE)


def default_extension(file_type: str) -> Optional[str]:
    for extension, known_type in FILETYPE_BY_EXTENSION.items():
        if known_type == unquote(file_type):
            return extension
    return None


def detect_group(basename: str, file_type: str, options: FileOptions) -> str:
    if _extension(basename) == "xcdatamodeld":
        return "Sources"
    if options.custom_framework and options.embed:
        return GROUP_BY_FILETYPE[FileType.EMBEDDED_FRAMEWORK.value]
    return GROUP_BY_FILETYPE.get(unquote(file_type), DEFAULT_GROUP)


def detect_source_tree(file_type: str, options: FileOptions) -> str:
    if options.explicit_file_type:
        return DEFAULT_PRODUCT_SOURCETREE
    if options.custom_framework:
        return DEFAULT_SOURCETREE
    return SOURCETREE_BY_FILETYPE.get(unquote(file_type), DEFAULT_SOURCETREE)


def default_path(path: str, file_type: str, options: FileOptions) -> str:
    if options.custom_framework:
        return path
    prefix = PATH_BY_FILETYPE.get(unquote(file_type))
    if prefix:
        return posixpath.join(prefix, posixpath.basename(path))
    return path


def default_encoding(file_type: str) -> Optional[int]:
    return ENCODING_BY_FILETYPE.get(unquote(file_type))


def file_settings(options: FileOptions) -> Optional[Dict[str, Any]]:
    settings: Dict[str, Any] = {}
    if options.weak:
        settings["ATTRIBUTES"] = ["Weak"]
    if options.compiler_flags:
        settings["COMPILER_FLAGS"] = quote(options.compiler_flags)
    if options.embed and options.sign:
        settings.setdefault("ATTRIBUTES", []).append("CodeSignOnCopy")
    return settings or None


def describe(path: str, options: Optional[FileOptions] = None) -> FileDescriptor:
    """
    Build the descriptor for a file path.

    Args:
        path: File path, relative to the group it will be placed in.
        options: Overrides for the inferred attributes.

    Returns:
        An ExplicitTypeFile when an explicit type is given (a build product),
        an InferredTypeFile otherwise.
    """
    options = options or FileOptions()
    path = path.replace("\\", "/")
    basename = posixpath.basename(path)
    dirname = posixpath.dirname(path) if options.custom_framework else None

    if options.explicit_file_type:
        extension = default_extension(options.explicit_file_type)
        if extension:
            basename = f"{basename}.{extension}"
        return ExplicitTypeFile(
            basename=basename,
            source_tree=options.source_tree
            or detect_source_tree(options.explicit_file_type, options),
            settings=file_settings(options),
            custom_framework=options.custom_framework,
            dirname=dirname,
            explicit_file_type=options.explicit_file_type,
        )

    file_type = options.last_known_file_type or detect_type(path)
    encoding = options.default_encoding or default_encoding(file_type)
    return InferredTypeFile(
        basename=basename,
        source_tree=options.source_tree or detect_source_tree(file_type, options),
        settings=file_settings(options),
        custom_framework=options.custom_framework,
        dirname=dirname,
        path=default_path(path, file_type, options),
        last_known_file_type=file_type,
        group=detect_group(basename, file_type, options),
        file_encoding=encoding,
        default_encoding=encoding,
    )


def file_group(file: PhaseMember) -> Optional[str]:
    if isinstance(file, InferredTypeFile):
        return file.group
    if isinstance(file, ExplicitTypeFile):
        return file.product_group
    if isinstance(file, LocalizationGroup):
        return file.group
    raise TypeError(f"Unsupported file descriptor: {type(file).__name__}")


def file_path(file: FileDescriptor) -> Optional[str]:
    if isinstance(file, InferredTypeFile):
        return file.path
    if isinstance(file, ExplicitTypeFile):
        return file.product_path
    raise TypeError(f"Unsupported file descriptor: {type(file).__name__}")
