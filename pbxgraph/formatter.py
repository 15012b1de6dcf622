"""
Xcode project file formatter.

This module converts a ProjectDocument back into the text Xcode writes for a
project.pbxproj file. Layout follows Xcode exactly: tab indentation, one
`Begin`/`End` comment pair per object section, and single-line records for
PBXBuildFile and PBXFileReference. Records and sections are written in the
order they are stored; nothing is re-sorted.
"""

import enum
from typing import Any, Dict, List, Optional, Union

from pbxgraph.config import WriterOptions
from pbxgraph.model import INLINE_ISAS, ProjectDocument, Reference, Section
from pbxgraph.utils import unquote

INDENT = "\t"

FormattableValue = Union[None, Reference, dict, list, enum.Enum, int, float, bool, str]


def format_scalar(value: FormattableValue) -> str:
    """
    Format a scalar value as wire text.

    Args:
        value: A string (already in wire form), number, bool, enum or None.

    Returns:
        The text written after `key = `.
    """
    # Missing values are written as an empty string
    if value is None:
        return '""'

    # Xcode represents booleans as 0/1
    elif isinstance(value, bool):
        return "1" if value else "0"

    elif isinstance(value, enum.Enum):
        return format_scalar(value.value)

    elif isinstance(value, (int, float)):
        return str(value)

    elif isinstance(value, str):
        return value

    else:
        raise TypeError(f"Unsupported type: {type(value).__name__} for value: {value}")


def format_annotated(value: FormattableValue, comment: Optional[str] = None) -> str:
    if isinstance(value, Reference):
        return format_annotated(value.id, value.comment)
    if comment:
        return f"{format_scalar(value)} /* {comment} */"
    return format_scalar(value)


class Writer:
    """
    Serializer state: the output buffer and the current indentation level.
    """

    def __init__(self, document: ProjectDocument, options: Optional[WriterOptions] = None):
        self.document = document
        self.options = options or WriterOptions()
        self.indent_level = 0
        self.buffer: List[str] = []

    def _skip(self, value: Any) -> bool:
        return self.options.omit_empty_values and value is None

    def write(self, text: str) -> None:
        self.buffer.append(INDENT * self.indent_level + text)

    def write_flush(self, text: str) -> None:
        # column 0, whatever the current indentation
        self.buffer.append(text)

    def write_sync(self) -> str:
        self.buffer = []
        self.indent_level = 0
        if self.document.head_comment:
            self.write(f"// {self.document.head_comment}\n")
        self.write_project()
        return "".join(self.buffer)

    def write_project(self) -> None:
        self.write("{\n")
        self.indent_level += 1
        for key, value in self.document.project.items():
            if key == "objects" and isinstance(value, dict):
                self.write(f"{key} = {{\n")
                self.indent_level += 1
                self.write_objects_sections(value)
                self.indent_level -= 1
                self.write("};\n")
            else:
                self.write_field(key, value)
        self.indent_level -= 1
        self.write("}\n")

    def write_field(self, key: str, value: Any) -> None:
        if isinstance(value, list):
            self.write_array(key, value)
        elif isinstance(value, dict):
            self.write(f"{key} = {{\n")
            self.indent_level += 1
            self.write_object(value)
            self.indent_level -= 1
            self.write("};\n")
        elif self._skip(value):
            return
        else:
            self.write(f"{key} = {format_annotated(value)};\n")

    def write_object(self, record: Dict[str, Any]) -> None:
        for key, value in record.items():
            self.write_field(key, value)

    def write_array(self, key: str, items: List[Any]) -> None:
        self.write(f"{key} = (\n")
        self.indent_level += 1
        for item in items:
            if isinstance(item, dict):
                self.write("{\n")
                self.indent_level += 1
                self.write_object(item)
                self.indent_level -= 1
                self.write("},\n")
            else:
                self.write(f"{format_annotated(item)},\n")
        self.indent_level -= 1
        self.write(");\n")

    def write_objects_sections(self, sections: Dict[str, Section]) -> None:
        for isa, section in sections.items():
            self.write_flush("\n")
            self.write_flush(f"/* Begin {isa} section */\n")
            self.write_section(section)
            self.write_flush(f"/* End {isa} section */\n")

    def write_section(self, section: Section) -> None:
        for key, record, comment in section.entries():
            if unquote(record.get("isa")) in INLINE_ISAS:
                self.write_inline_object(key, comment, record)
                continue
            if comment:
                self.write(f"{key} /* {comment} */ = {{\n")
            else:
                self.write(f"{key} = {{\n")
            self.indent_level += 1
            self.write_object(record)
            self.indent_level -= 1
            self.write("};\n")

    def write_inline_object(self, key: str, comment: Optional[str], record: Dict[str, Any]) -> None:
        output: List[str] = []
        self._inline_object(output, key, comment, record)
        self.write("".join(output).strip() + "\n")

    def _inline_object(
        self, output: List[str], name: str, comment: Optional[str], record: Dict[str, Any]
    ) -> None:
        if comment:
            output.append(f"{name} /* {comment} */ = {{")
        else:
            output.append(f"{name} = {{")
        for key, value in record.items():
            if isinstance(value, list):
                output.append(f"{key} = (")
                for item in value:
                    output.append(f"{format_annotated(item)}, ")
                output.append("); ")
            elif isinstance(value, dict):
                self._inline_object(output, key, None, value)
            elif self._skip(value):
                continue
            else:
                output.append(f"{key} = {format_annotated(value)}; ")
        output.append("}; ")


def format_project(document: ProjectDocument, options: Optional[WriterOptions] = None) -> str:
    """
    Convert a ProjectDocument to its project.pbxproj text.

    Args:
        document: The parsed or edited project.
        options: Writer options; empty values are written unless
            omit_empty_values is set.

    Returns:
        The formatted project file content.
    """
    return Writer(document, options).write_sync()
