"""Join the parsed documents into SQL table collections.

Inputs are the UML model tree and modifier facts, the DDL projections, and
the resolved primitive types. Lookups go through indices built once per
extraction; for duplicate ids or facts the first occurrence wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from umlseed.core.errors import ModelReferenceError, VocabularyError
from umlseed.core.logging import get_logger
from umlseed.project.ddl import DDLProject, DDLScript
from umlseed.project.models import (
    CHAR_MAX_SIZE,
    VARCHAR_MAX_SIZE,
    CheckConstraint,
    Freeform,
    OneOf,
    SQLColumn,
    SQLTable,
    SQLTableCollection,
    SQLType,
    SQLTypeName,
)
from umlseed.project.uml_model import (
    ForeignKeyModifier,
    NullableModifier,
    PrimaryKeyModifier,
    TypeModifier,
    UMLClass,
    UMLDocument,
    UMLModifier,
    UMLProperty,
    UniqueModifier,
)

log = get_logger("project.assembler")

DEFAULT_CHAR_SIZE = 31
DEFAULT_VARCHAR_SIZE = 255

_TYPE_SIZE_RE = re.compile(r"^\((\d+)\)$")
_ONE_OF_RE = re.compile(r"^in \((.+)\)$")
_QUOTED_RE = re.compile(r"^'(.+)'$")


@dataclass(slots=True)
class ModifierIndex:
    """Modifier facts keyed by property id."""

    primary_keys: set[str] = field(default_factory=set)
    unique: set[str] = field(default_factory=set)
    nullable: dict[str, bool] = field(default_factory=dict)
    type_modifiers: dict[str, str] = field(default_factory=dict)
    foreign_keys: dict[str, str] = field(default_factory=dict)  # from id -> to id

    @classmethod
    def build(cls, modifiers: list[UMLModifier]) -> ModifierIndex:
        index = cls()
        for modifier in modifiers:
            match modifier:
                case PrimaryKeyModifier(property_id=pid):
                    index.primary_keys.add(pid)
                case UniqueModifier(property_id=pid):
                    index.unique.add(pid)
                case NullableModifier(property_id=pid, nullable=nullable):
                    index.nullable.setdefault(pid, nullable)
                case TypeModifier(property_id=pid, modifier=text):
                    index.type_modifiers.setdefault(pid, text)
                case ForeignKeyModifier(from_property_id=from_id, to_property_id=to_id):
                    index.foreign_keys.setdefault(from_id, to_id)
        return index


def parse_check_constraint(body: str) -> CheckConstraint:
    """Interpret a check body: ``in ('a', 'b')`` is OneOf, anything else Freeform."""
    match = _ONE_OF_RE.match(body)
    if match is None:
        return Freeform(body=body)

    options = []
    for part in match.group(1).split(", "):
        quoted = _QUOTED_RE.match(part)
        if quoted is None:
            return Freeform(body=body)
        options.append(quoted.group(1))
    return OneOf(options=options)


def _sized_type(type_name: SQLTypeName, type_modifier: str | None, property_id: str) -> SQLType:
    is_char = type_name is SQLTypeName.CHAR
    default = DEFAULT_CHAR_SIZE if is_char else DEFAULT_VARCHAR_SIZE
    limit = CHAR_MAX_SIZE if is_char else VARCHAR_MAX_SIZE

    if type_modifier is None:
        log.debug("type_size_defaulted", property_id=property_id, size=default)
        size = default
    elif (match := _TYPE_SIZE_RE.match(type_modifier)) is None:
        log.warning(
            "type_size_malformed",
            property_id=property_id,
            modifier=type_modifier,
            size=default,
        )
        size = default
    else:
        size = int(match.group(1))
        if size > limit:
            raise VocabularyError.type_size_out_of_range(type_name.value, size, limit)

    return SQLType.char(size) if is_char else SQLType.varchar(size)


def resolve_sql_type(
    type_name: SQLTypeName, type_modifier: str | None, property_id: str = ""
) -> SQLType:
    """Build the concrete column type, reading the size for CHAR/VARCHAR."""
    if type_name.is_sized:
        return _sized_type(type_name, type_modifier, property_id)
    return SQLType(name=type_name)


class ModelAssembler:
    """Builds one SQLTableCollection per DDL script."""

    def __init__(
        self,
        document: UMLDocument,
        sql_types: dict[str, SQLTypeName],
    ) -> None:
        self._sql_types = sql_types
        self._modifiers = ModifierIndex.build(document.modifiers)

        self._classes: dict[str, UMLClass] = {}
        self._checks: dict[str, str] = {}
        for cls in document.iter_classes():
            self._classes.setdefault(cls.id, cls)
            # Check constraints are looked up by property name across all classes
            for constraint in cls.constraints:
                if constraint.property_name is not None and constraint.body is not None:
                    self._checks.setdefault(constraint.property_name, constraint.body)

    def assemble(self, projects: list[DDLProject]) -> list[SQLTableCollection]:
        return [
            self.assemble_script(script) for project in projects for script in project.scripts
        ]

    def assemble_script(self, script: DDLScript) -> SQLTableCollection:
        classes = []
        for ddl_class in script.classes:
            cls = self._classes.get(ddl_class.class_id)
            if cls is None:
                raise ModelReferenceError.class_not_found(ddl_class.class_id)
            classes.append(cls)

        # Foreign keys only resolve to classes projected into this script
        owners: dict[str, tuple[UMLClass, UMLProperty]] = {}
        for cls in classes:
            for prop in cls.properties:
                owners.setdefault(prop.id, (cls, prop))

        tables = []
        for ddl_class, cls in zip(script.classes, classes, strict=True):
            if cls.name is None:
                raise ModelReferenceError.missing_name("class", cls.id)
            properties = {}
            for prop in cls.properties:
                properties.setdefault(prop.id, prop)

            columns = []
            for property_id in ddl_class.property_ids:
                prop = properties.get(property_id)
                if prop is None:
                    raise ModelReferenceError.property_not_found(cls.name, property_id)
                if prop.name is None or prop.type_href is None:
                    log.debug(
                        "property_skipped",
                        table=cls.name,
                        property_id=property_id,
                        has_name=prop.name is not None,
                    )
                    continue
                columns.append(self._column(prop, prop.name, prop.type_href, owners))

            tables.append(SQLTable(name=cls.name, columns=columns))

        log.debug("script_assembled", script_id=script.script_id, tables=len(tables))
        return SQLTableCollection(tables=tables)

    def _column(
        self,
        prop: UMLProperty,
        name: str,
        type_href: str,
        owners: dict[str, tuple[UMLClass, UMLProperty]],
    ) -> SQLColumn:
        type_name = self._sql_types.get(type_href)
        if type_name is None:
            raise ModelReferenceError.type_not_resolved(name, type_href)

        check = self._checks.get(name)
        return SQLColumn(
            name=name,
            sql_type=resolve_sql_type(
                type_name, self._modifiers.type_modifiers.get(prop.id), prop.id
            ),
            primary_key=prop.id in self._modifiers.primary_keys,
            nullable=self._modifiers.nullable.get(prop.id, False),
            foreign_key=self._foreign_key(prop.id, owners),
            check_constraint=parse_check_constraint(check) if check is not None else None,
        )

    def _foreign_key(
        self,
        property_id: str,
        owners: dict[str, tuple[UMLClass, UMLProperty]],
    ) -> tuple[str, str] | None:
        to_id = self._modifiers.foreign_keys.get(property_id)
        if to_id is None:
            return None
        owner = owners.get(to_id)
        if owner is None:
            log.debug("foreign_key_outside_script", from_id=property_id, to_id=to_id)
            return None
        cls, target = owner
        if target.name is None:
            raise ModelReferenceError.missing_name("property", target.id)
        if cls.name is None:
            raise ModelReferenceError.missing_name("class", cls.id)
        return cls.name, target.name


def assemble_collections(
    document: UMLDocument,
    projects: list[DDLProject],
    sql_types: dict[str, SQLTypeName],
) -> list[SQLTableCollection]:
    """Build one table collection per DDL script, in document order."""
    return ModelAssembler(document, sql_types).assemble(projects)
