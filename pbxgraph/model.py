# Xcode project file model.
#
# This module defines the in-memory representation of an Xcode project file
# (.pbxproj): identifiers, annotated references, object sections keyed by isa,
# and the static lookup tables used to describe files and targets.

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, Tuple

from pbxgraph.utils import unquote


@dataclass
class Reference:
    # An identifier (or any scalar) paired with the label Xcode writes after it
    # as `/* label */`. The label is annotation only.
    id: str
    comment: Optional[str] = None


# An object section, e.g. every PBXBuildFile in the project. Records are kept
# in insertion order; the label written next to each identifier lives in
# `comments` rather than in the record mapping.
class Section(MutableMapping[str, Dict[str, Any]]):
    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}
        self.comments: Dict[str, str] = {}

    def __getitem__(self, key: str) -> Dict[str, Any]:
        return self._records[key]

    def __setitem__(self, key: str, record: Dict[str, Any]) -> None:
        self._records[key] = record

    def __delitem__(self, key: str) -> None:
        del self._records[key]
        self.comments.pop(key, None)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Section({len(self._records)} records)"

    def add(self, key: str, record: Dict[str, Any], comment: Optional[str] = None) -> None:
        self._records[key] = record
        if comment is not None:
            self.comments[key] = comment

    def comment(self, key: str) -> Optional[str]:
        return self.comments.get(key)

    def entries(self) -> Iterator[Tuple[str, Dict[str, Any], Optional[str]]]:
        for key, record in self._records.items():
            yield key, record, self.comments.get(key)


@dataclass
class ProjectDocument:
    # Root dictionary of the file: archiveVersion, classes, objectVersion,
    # objects (isa -> Section) and rootObject.
    project: Dict[str, Any] = field(default_factory=dict)
    head_comment: Optional[str] = None

    @property
    def objects(self) -> Dict[str, Section]:
        return self.project.setdefault("objects", {})


@dataclass(frozen=True)
class ObjectEntry:
    uuid: str
    obj: Dict[str, Any]


@dataclass(frozen=True)
class TargetEntry:
    kind: "TargetKind"
    uuid: str
    obj: Dict[str, Any]

    @property
    def name(self) -> str:
        return unquote(self.obj.get("name"))


# Source Tree values used in PBXFileReference and PBXGroup
class SourceTree(Enum):
    GROUP = "<group>"
    ABSOLUTE = "<absolute>"
    SOURCE_ROOT = "SOURCE_ROOT"
    BUILT_PRODUCTS_DIR = "BUILT_PRODUCTS_DIR"
    SDKROOT = "SDKROOT"
    DEVELOPER_DIR = "DEVELOPER_DIR"


# Destination subfolder specifications used in PBXCopyFilesBuildPhase
class DstSubfolderSpec(Enum):
    ABSOLUTE_PATH = 0
    WRAPPER = 1
    EXECUTABLES = 6
    RESOURCES = 7
    FRAMEWORKS = 10
    SHARED_FRAMEWORKS = 11
    SHARED_SUPPORT = 12
    PLUGINS = 13
    JAVA_RESOURCES = 15
    PRODUCTS_DIRECTORY = 16
    XPC_SERVICES = 0


# File types used in PBXFileReference
class FileType(Enum):
    ARCHIVE = "archive.ar"
    APPLICATION = "wrapper.application"
    APP_EXTENSION = "wrapper.app-extension"
    PLUGIN = "wrapper.plug-in"
    DYLIB = "compiled.mach-o.dylib"
    FRAMEWORK = "wrapper.framework"
    EMBEDDED_FRAMEWORK = "embedded.framework"
    C_HEADER = "sourcecode.c.h"
    OBJC = "sourcecode.c.objc"
    TEXT = "text"
    CFBUNDLE = "wrapper.cfbundle"
    PLIST = "text.plist.xml"
    SHELL_SCRIPT = "text.script.sh"
    SWIFT = "sourcecode.swift"
    TBD = "sourcecode.text-based-dylib-definition"
    ASSET_CATALOG = "folder.assetcatalog"
    XCCONFIG = "text.xcconfig"
    XCDATAMODEL = "wrapper.xcdatamodel"
    PB_PROJECT = "wrapper.pb-project"
    XIB = "file.xib"
    STRINGS = "text.plist.strings"
    UNKNOWN = "unknown"


# Product types used in PBXNativeTarget
class ProductType(Enum):
    APPLICATION = "com.apple.product-type.application"
    APP_EXTENSION = "com.apple.product-type.app-extension"
    BUNDLE = "com.apple.product-type.bundle"
    TOOL = "com.apple.product-type.tool"
    DYNAMIC_LIBRARY = "com.apple.product-type.library.dynamic"
    FRAMEWORK = "com.apple.product-type.framework"
    STATIC_LIBRARY = "com.apple.product-type.library.static"
    UNIT_TEST_BUNDLE = "com.apple.product-type.bundle.unit-test"
    WATCH_APP = "com.apple.product-type.application.watchapp"
    WATCH2_APP = "com.apple.product-type.application.watchapp2"
    WATCH_EXTENSION = "com.apple.product-type.watchkit-extension"
    WATCH2_EXTENSION = "com.apple.product-type.watchkit2-extension"


# Target roles accepted by Project.add_target
class TargetType(Enum):
    APPLICATION = "application"
    APP_EXTENSION = "app_extension"
    BUNDLE = "bundle"
    COMMAND_LINE_TOOL = "command_line_tool"
    DYNAMIC_LIBRARY = "dynamic_library"
    FRAMEWORK = "framework"
    STATIC_LIBRARY = "static_library"
    UNIT_TEST_BUNDLE = "unit_test_bundle"
    WATCH_APP = "watch_app"
    WATCH2_APP = "watch2_app"
    WATCH_EXTENSION = "watch_extension"
    WATCH2_EXTENSION = "watch2_extension"

    @staticmethod
    def parse(value: str) -> Optional["TargetType"]:
        try:
            return TargetType(value)
        except ValueError:
            return None


class ProxyType(Enum):
    TARGET_DEPENDENCY = 1  # For target dependencies
    PRODUCT_REFERENCE = 2  # For product references


# The three target flavours, keyed by the isa of their section
class TargetKind(Enum):
    NATIVE = "PBXNativeTarget"
    AGGREGATE = "PBXAggregateTarget"
    LEGACY = "PBXLegacyTarget"


DEFAULT_SOURCETREE = '"<group>"'
DEFAULT_PRODUCT_SOURCETREE = SourceTree.BUILT_PRODUCTS_DIR.value
DEFAULT_FILEENCODING = 4  # UTF-8
DEFAULT_GROUP = "Resources"
DEFAULT_FILETYPE = FileType.UNKNOWN.value
INHERITED = '"$(inherited)"'

FILETYPE_BY_EXTENSION: Mapping[str, str] = MappingProxyType(
    {
        "a": FileType.ARCHIVE.value,
        "app": FileType.APPLICATION.value,
        "appex": FileType.APP_EXTENSION.value,
        "bundle": FileType.PLUGIN.value,
        "dylib": FileType.DYLIB.value,
        "framework": FileType.FRAMEWORK.value,
        "h": FileType.C_HEADER.value,
        "m": FileType.OBJC.value,
        "markdown": FileType.TEXT.value,
        "mdimporter": FileType.CFBUNDLE.value,
        "octest": FileType.CFBUNDLE.value,
        "pch": FileType.C_HEADER.value,
        "plist": FileType.PLIST.value,
        "sh": FileType.SHELL_SCRIPT.value,
        "swift": FileType.SWIFT.value,
        "tbd": FileType.TBD.value,
        "xcassets": FileType.ASSET_CATALOG.value,
        "xcconfig": FileType.XCCONFIG.value,
        "xcdatamodel": FileType.XCDATAMODEL.value,
        "xcodeproj": FileType.PB_PROJECT.value,
        "xctest": FileType.CFBUNDLE.value,
        "xib": FileType.XIB.value,
        "strings": FileType.STRINGS.value,
    }
)

GROUP_BY_FILETYPE: Mapping[str, str] = MappingProxyType(
    {
        FileType.ARCHIVE.value: "Frameworks",
        FileType.DYLIB.value: "Frameworks",
        FileType.TBD.value: "Frameworks",
        FileType.FRAMEWORK.value: "Frameworks",
        FileType.EMBEDDED_FRAMEWORK.value: "Embed Frameworks",
        FileType.C_HEADER.value: "Resources",
        FileType.OBJC.value: "Sources",
        FileType.SWIFT.value: "Sources",
    }
)

PATH_BY_FILETYPE: Mapping[str, str] = MappingProxyType(
    {
        FileType.DYLIB.value: "usr/lib/",
        FileType.TBD.value: "usr/lib/",
        FileType.FRAMEWORK.value: "System/Library/Frameworks/",
    }
)

SOURCETREE_BY_FILETYPE: Mapping[str, str] = MappingProxyType(
    {
        FileType.DYLIB.value: SourceTree.SDKROOT.value,
        FileType.TBD.value: SourceTree.SDKROOT.value,
        FileType.FRAMEWORK.value: SourceTree.SDKROOT.value,
    }
)

ENCODING_BY_FILETYPE: Mapping[str, int] = MappingProxyType(
    {
        FileType.C_HEADER.value: DEFAULT_FILEENCODING,
        FileType.OBJC.value: DEFAULT_FILEENCODING,
        FileType.SWIFT.value: DEFAULT_FILEENCODING,
        FileType.TEXT.value: DEFAULT_FILEENCODING,
        FileType.PLIST.value: DEFAULT_FILEENCODING,
        FileType.SHELL_SCRIPT.value: DEFAULT_FILEENCODING,
        FileType.XCCONFIG.value: DEFAULT_FILEENCODING,
        FileType.STRINGS.value: DEFAULT_FILEENCODING,
    }
)

PRODUCTTYPE_BY_TARGETTYPE: Mapping[TargetType, ProductType] = MappingProxyType(
    {
        TargetType.APPLICATION: ProductType.APPLICATION,
        TargetType.APP_EXTENSION: ProductType.APP_EXTENSION,
        TargetType.BUNDLE: ProductType.BUNDLE,
        TargetType.COMMAND_LINE_TOOL: ProductType.TOOL,
        TargetType.DYNAMIC_LIBRARY: ProductType.DYNAMIC_LIBRARY,
        TargetType.FRAMEWORK: ProductType.FRAMEWORK,
        TargetType.STATIC_LIBRARY: ProductType.STATIC_LIBRARY,
        TargetType.UNIT_TEST_BUNDLE: ProductType.UNIT_TEST_BUNDLE,
        TargetType.WATCH_APP: ProductType.WATCH_APP,
        TargetType.WATCH2_APP: ProductType.WATCH2_APP,
        TargetType.WATCH_EXTENSION: ProductType.WATCH_EXTENSION,
        TargetType.WATCH2_EXTENSION: ProductType.WATCH2_EXTENSION,
    }
)

FILETYPE_BY_PRODUCTTYPE: Mapping[ProductType, str] = MappingProxyType(
    {
        ProductType.APPLICATION: FileType.APPLICATION.value,
        ProductType.APP_EXTENSION: FileType.APP_EXTENSION.value,
        ProductType.BUNDLE: FileType.PLUGIN.value,
        ProductType.TOOL: FileType.DYLIB.value,
        ProductType.DYNAMIC_LIBRARY: FileType.DYLIB.value,
        ProductType.FRAMEWORK: FileType.FRAMEWORK.value,
        ProductType.STATIC_LIBRARY: FileType.ARCHIVE.value,
        ProductType.UNIT_TEST_BUNDLE: FileType.CFBUNDLE.value,
        ProductType.WATCH_APP: FileType.APPLICATION.value,
        ProductType.WATCH2_APP: FileType.APPLICATION.value,
        ProductType.WATCH_EXTENSION: FileType.APP_EXTENSION.value,
        ProductType.WATCH2_EXTENSION: FileType.APP_EXTENSION.value,
    }
)

# Where a copy-files phase copies its files, keyed by target type name
# ("frameworks" is the embed-frameworks destination)
DESTINATION_BY_FOLDER_TYPE: Mapping[str, DstSubfolderSpec] = MappingProxyType(
    {
        TargetType.APPLICATION.value: DstSubfolderSpec.WRAPPER,
        TargetType.APP_EXTENSION.value: DstSubfolderSpec.PLUGINS,
        TargetType.BUNDLE.value: DstSubfolderSpec.WRAPPER,
        TargetType.COMMAND_LINE_TOOL.value: DstSubfolderSpec.WRAPPER,
        TargetType.DYNAMIC_LIBRARY.value: DstSubfolderSpec.PRODUCTS_DIRECTORY,
        TargetType.FRAMEWORK.value: DstSubfolderSpec.SHARED_FRAMEWORKS,
        "frameworks": DstSubfolderSpec.FRAMEWORKS,
        TargetType.STATIC_LIBRARY.value: DstSubfolderSpec.PRODUCTS_DIRECTORY,
        TargetType.UNIT_TEST_BUNDLE.value: DstSubfolderSpec.WRAPPER,
        TargetType.WATCH_APP.value: DstSubfolderSpec.WRAPPER,
        TargetType.WATCH2_APP.value: DstSubfolderSpec.PRODUCTS_DIRECTORY,
        TargetType.WATCH_EXTENSION.value: DstSubfolderSpec.PLUGINS,
        TargetType.WATCH2_EXTENSION.value: DstSubfolderSpec.PLUGINS,
    }
)

# Records written on a single line by Xcode
INLINE_ISAS = frozenset({"PBXBuildFile", "PBXFileReference"})

# Fields whose values point at other records
REFERENCE_FIELDS = frozenset(
    {
        "baseConfigurationReference",
        "buildConfigurationList",
        "containerPortal",
        "currentVersion",
        "fileRef",
        "mainGroup",
        "productRef",
        "productRefGroup",
        "productReference",
        "remoteGlobalIDString",
        "remoteRef",
        "rootObject",
        "target",
        "targetProxy",
    }
)

REFERENCE_LIST_FIELDS = frozenset(
    {
        "buildConfigurations",
        "buildPhases",
        "buildRules",
        "children",
        "dependencies",
        "files",
        "packageProductDependencies",
        "packageReferences",
        "targets",
    }
)
