from typing import Any, List, Set

from pbxgraph.model import (
    REFERENCE_FIELDS,
    REFERENCE_LIST_FIELDS,
    ProjectDocument,
    Reference,
    Section,
)
from pbxgraph.utils import unquote


def collect_ids(document: ProjectDocument) -> Set[str]:
    all_ids: Set[str] = set()
    for section in document.objects.values():
        all_ids.update(section.keys())
    return all_ids


def _ref_value(value: Any) -> str:
    if isinstance(value, Reference):
        return unquote(value.id)
    return unquote(value)


def validate_references(document: ProjectDocument) -> List[str]:
    """
    Report every reference whose identifier resolves to no record.

    Values carrying a `/* label */` are checked wherever they appear; plain
    values are checked in the fields known to hold identifiers. A proxy into
    another project file points outside this graph and is not checked.
    """
    errors = []
    all_ids = collect_ids(document)
    root_object = _ref_value(document.project.get("rootObject"))

    def check_value(value: Any, context: str, is_reference: bool):
        if isinstance(value, Reference):
            if _ref_value(value) not in all_ids:
                errors.append(f"Invalid reference in {context}: {value.id}")
        elif isinstance(value, list):
            for index, item in enumerate(value):
                check_value(item, f"{context}[{index}]", is_reference)
        elif isinstance(value, dict):
            check_record(value, context)
        elif is_reference and isinstance(value, str):
            if _ref_value(value) not in all_ids:
                errors.append(f"Invalid reference in {context}: {value}")

    def check_record(record: dict, context: str):
        external_proxy = (
            "containerPortal" in record and _ref_value(record["containerPortal"]) != root_object
        )
        for key, value in record.items():
            if key == "remoteGlobalIDString" and external_proxy:
                continue
            # TargetAttributes is keyed by target identifier
            if key == "TargetAttributes":
                continue
            is_reference = key in REFERENCE_FIELDS or key in REFERENCE_LIST_FIELDS
            check_value(value, f"{context}.{key}", is_reference)

    for key, value in document.project.items():
        if key == "objects":
            continue
        check_value(value, f"project.{key}", key in REFERENCE_FIELDS)

    for isa, section in document.objects.items():
        if not isinstance(section, Section):
            errors.append(f"Unknown section type for {isa}: {type(section).__name__}")
            continue
        for key, record in section.items():
            check_record(record, f"{isa}.{key}")

    return errors
