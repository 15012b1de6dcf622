from pbxgraph.config import WriterOptions
from pbxgraph.errors import (
    BuildPhaseNotFoundError,
    InvalidArgumentError,
    InvalidGroupError,
    InvalidTargetError,
    MalformedPreconditionError,
    PbxprojError,
    PbxSyntaxError,
)
from pbxgraph.file import FileOptions, describe
from pbxgraph.formatter import format_project
from pbxgraph.model import ObjectEntry, ProjectDocument, Reference, Section, TargetEntry, TargetType
from pbxgraph.objects import ShellScriptOptions
from pbxgraph.parser import parse_project
from pbxgraph.project import Project
from pbxgraph.validator import validate_references
