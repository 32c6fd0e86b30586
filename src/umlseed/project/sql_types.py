"""SQL primitive type resolution across used projects.

Property types point into externally referenced type packages
(``type href="SQL2011.mdzip#<id>"``), so resolution takes two scans:

1. The project manifest lists ``projectUsages``; each usage whose project
   file name is referenced by some property type yields a share point id
   from its ``mountPoints`` element.
2. Shared-model snapshot entries contain ``uml:Package`` elements with a
   matching ``ID``; their ``uml:PrimitiveType`` members map type ids to names.

Resolved keys use the ``<package-name>#<local-id>`` form of ``type_href``.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import IO

from umlseed.core.errors import ModelReferenceError, VocabularyError
from umlseed.core.logging import get_logger
from umlseed.project.cursor import (
    Attributes,
    EventCursor,
    descend,
    get_attribute,
    has_attribute,
    scan,
)
from umlseed.project.models import SQLTypeName

log = get_logger("project.sql_types")

SNAPSHOT_SUFFIX = "_resource_com$dnomagic$dmagicdraw$duml_umodel$dshared_umodel$dsnapshot"

# Names not listed here fail the whole extraction
TYPE_VOCABULARY: dict[str, SQLTypeName] = {
    "decimal": SQLTypeName.DECIMAL,
    "dec": SQLTypeName.DECIMAL,
    "char": SQLTypeName.CHAR,
    "varchar": SQLTypeName.VARCHAR,
    "float": SQLTypeName.FLOAT,
    "Integer": SQLTypeName.INT,
    "integer": SQLTypeName.INT,
    "int": SQLTypeName.INT,
    "date": SQLTypeName.DATE,
    "Boolean": SQLTypeName.BOOL,
}

_IGNORED_PRIMITIVE = "StructuredExpression"


@dataclass(slots=True)
class UsedPackage:
    """A used project that defines some of the referenced types."""

    name: str
    share_point_id: str
    needed_types: set[str] = field(default_factory=set)


def is_snapshot_entry(filename: str) -> bool:
    return filename.endswith(SNAPSHOT_SUFFIX)


def parse_type_name(name: str) -> SQLTypeName:
    """Map a primitive type name onto its SQL type category.

    Raises:
        VocabularyError: If the name is not part of the known vocabulary.
    """
    try:
        return TYPE_VOCABULARY[name]
    except KeyError:
        raise VocabularyError.unknown_type(name) from None


def needed_types_by_package(type_hrefs: Iterable[str]) -> dict[str, set[str]]:
    """Group ``<package>#<id>`` references by package name. Hrefs without ``#`` are skipped."""
    grouped: dict[str, set[str]] = defaultdict(set)
    for href in type_hrefs:
        package, sep, type_id = href.partition("#")
        if not sep:
            continue
        grouped[package].add(type_id)
    return dict(grouped)


def _used_project_name(attrs: Attributes) -> str | None:
    uri = attrs.get("usedProjectURI")
    if uri is None:
        return None
    return uri.rsplit("/", 1)[-1]


def _parse_used_package(
    cursor: EventCursor, name: str, needed_types: set[str]
) -> UsedPackage:
    share_point_id: str | None = None

    def visit(cursor: EventCursor, element: str, attrs: Attributes) -> None:
        nonlocal share_point_id
        if element == "mountPoints" and share_point_id is None:
            share_point_id = attrs.get("sharePointID")

    descend(cursor, visit)

    if share_point_id is None:
        raise ModelReferenceError.missing_reference(f"Project usage '{name}'", "share point id")
    return UsedPackage(name=name, share_point_id=share_point_id, needed_types=needed_types)


def find_used_packages(
    stream: IO[bytes],
    type_hrefs: Iterable[str],
    *,
    document: str = "<manifest>",
) -> list[UsedPackage]:
    """Scan the project manifest for usages that define referenced types."""
    needed = needed_types_by_package(type_hrefs)
    packages: list[UsedPackage] = []
    cursor = EventCursor(stream, document=document)

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        if name != "projectUsages":
            return
        project_name = _used_project_name(attrs)
        if project_name is None or project_name not in needed:
            return
        packages.append(_parse_used_package(cursor, project_name, needed[project_name]))

    scan(cursor, visit)

    log.debug("used_packages_found", packages=[p.name for p in packages])
    return packages


def _parse_types_package(cursor: EventCursor) -> list[tuple[str, SQLTypeName]]:
    types: list[tuple[str, SQLTypeName]] = []

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        if name != "packagedElement" or not has_attribute(attrs, "xsi:type", "uml:PrimitiveType"):
            return
        type_name = get_attribute(attrs, "name", element="packagedElement")
        if type_name == _IGNORED_PRIMITIVE:
            return
        type_id = get_attribute(attrs, "xmi:id", element="packagedElement")
        types.append((type_id, parse_type_name(type_name)))

    descend(cursor, visit)
    return types


def parse_primitive_types(
    stream: IO[bytes],
    used_packages: list[UsedPackage],
    *,
    document: str = "<snapshot>",
) -> dict[str, SQLTypeName]:
    """Resolve needed primitive types defined in one snapshot document."""
    by_share_point = {}
    for package in used_packages:
        by_share_point.setdefault(package.share_point_id, package)

    resolved: dict[str, SQLTypeName] = {}
    cursor = EventCursor(stream, document=document)

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        if name != "uml:Package":
            return
        package = by_share_point.get(attrs.get("ID", ""))
        if package is None:
            return
        for type_id, type_name in _parse_types_package(cursor):
            if type_id in package.needed_types:
                resolved[f"{package.name}#{type_id}"] = type_name

    scan(cursor, visit)
    return resolved
