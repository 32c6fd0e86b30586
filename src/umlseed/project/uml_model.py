"""MagicDraw UML model document parser.

Reads ``com.nomagic.magicdraw.uml_model.model`` in a single pass and produces
two independent results:

1. The class-diagram tree: Model → Package → Class → {Property, Constraint}.
2. A flat list of SQL-profile modifier facts (primary key, nullable, foreign
   key, type size, unique) keyed by property id. Stereotype applications live
   next to ``uml:Model`` at the document root, not inside the tree.

Structure (abridged):
<xmi:XMI>
  <uml:Model xmi:id="..." name="Data">
    <packagedElement xmi:type="uml:Package" xmi:id="..." name="...">
      <packagedElement xmi:type="uml:Class" xmi:id="..." name="users">
        <ownedAttribute xmi:type="uml:Property" xmi:id="..." name="id">
          <type href="SQL2011.mdzip#int_id"/>
        </ownedAttribute>
        <ownedRule xmi:type="uml:Constraint" xmi:id="...">
          <constrainedElement xmi:idref="..."/>
          <specification><body>role in ('a', 'b')</body><language>SQL</language></specification>
        </ownedRule>
      </packagedElement>
    </packagedElement>
  </uml:Model>
  <SQLProfile:PKMember base_Property="..."/>
  <SQLProfile:Column base_Property="..." nullable="true"/>
  <SQLProfile:FK members="..." referencedMembers="..."/>
  <MagicDraw_Profile:typeModifier base_Element="..." typeModifier="(50)"/>
</xmi:XMI>
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import IO

from umlseed.core.errors import ModelReferenceError
from umlseed.core.logging import get_logger
from umlseed.project.cursor import (
    Attributes,
    EventCursor,
    descend,
    element_text,
    get_attribute,
    has_attribute,
    scan,
)

log = get_logger("project.uml_model")

CHECK_LANGUAGE = "SQL"
_CHECK_SEPARATOR = " in "


@dataclass(slots=True)
class UMLProperty:
    id: str
    name: str | None = None
    is_id: bool = False
    type_href: str | None = None  # "<package>#<local-id>"


@dataclass(slots=True)
class UMLConstraint:
    """Either a property-level constraint (property_id set, no body) or a
    class-level SQL check naming its property by name (class_id, property_name, body).
    """

    id: str
    class_id: str | None = None
    property_id: str | None = None
    property_name: str | None = None
    body: str | None = None


@dataclass(slots=True)
class UMLClass:
    id: str
    name: str | None = None
    properties: list[UMLProperty] = field(default_factory=list)
    constraints: list[UMLConstraint] = field(default_factory=list)


@dataclass(slots=True)
class UMLPackage:
    id: str
    name: str | None = None
    classes: list[UMLClass] = field(default_factory=list)


@dataclass(slots=True)
class UMLModel:
    id: str
    name: str
    packages: list[UMLPackage] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PrimaryKeyModifier:
    property_id: str


@dataclass(frozen=True, slots=True)
class NullableModifier:
    property_id: str
    nullable: bool


@dataclass(frozen=True, slots=True)
class ForeignKeyModifier:
    from_property_id: str
    to_property_id: str


@dataclass(frozen=True, slots=True)
class TypeModifier:
    property_id: str
    modifier: str  # raw text, expected "(<digits>)"


@dataclass(frozen=True, slots=True)
class UniqueModifier:
    property_id: str


UMLModifier = (
    PrimaryKeyModifier | NullableModifier | ForeignKeyModifier | TypeModifier | UniqueModifier
)


@dataclass(slots=True)
class UMLDocument:
    models: list[UMLModel] = field(default_factory=list)
    modifiers: list[UMLModifier] = field(default_factory=list)

    def iter_classes(self) -> Iterator[UMLClass]:
        for model in self.models:
            for package in model.packages:
                yield from package.classes

    def used_type_hrefs(self) -> set[str]:
        """Type references of every parsed property, for type resolution."""
        return {
            prop.type_href
            for cls in self.iter_classes()
            for prop in cls.properties
            if prop.type_href is not None
        }


def _is_typed(name: str, attrs: Attributes, element: str, xmi_type: str) -> bool:
    return name == element and has_attribute(attrs, "xmi:type", xmi_type)


def _parse_property(cursor: EventCursor, attrs: Attributes) -> UMLProperty:
    prop = UMLProperty(
        id=get_attribute(attrs, "xmi:id", element="ownedAttribute"),
        name=attrs.get("name"),
        is_id=attrs.get("isID", "false") == "true",
    )

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        # First <type href> wins
        if name == "type" and prop.type_href is None:
            prop.type_href = attrs.get("href")

    descend(cursor, visit)
    return prop


def _parse_constraint(cursor: EventCursor, attrs: Attributes) -> UMLConstraint | None:
    constraint_id = get_attribute(attrs, "xmi:id", element="ownedRule")
    constrained_id: str | None = None
    language: str | None = None
    body: str | None = None

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        nonlocal constrained_id, language, body
        if name == "constrainedElement" and constrained_id is None:
            constrained_id = attrs.get("xmi:idref")
        elif name == "body" and body is None:
            contents = element_text(cursor)
            if contents:
                body = contents
        elif name == "language" and language is None:
            language = element_text(cursor)

    descend(cursor, visit)

    if language == CHECK_LANGUAGE and body is not None and _CHECK_SEPARATOR in body:
        property_name, check = body.split(_CHECK_SEPARATOR, 1)
        if constrained_id is None:
            raise ModelReferenceError.missing_reference(
                f"Constraint {constraint_id}", "constrainedElement"
            )
        return UMLConstraint(
            id=constraint_id,
            class_id=constrained_id,
            property_name=property_name,
            body=f"in {check}",
        )

    if constrained_id is None:
        log.debug("constraint_discarded", constraint_id=constraint_id)
        return None

    return UMLConstraint(id=constraint_id, property_id=constrained_id)


def _parse_class(cursor: EventCursor, attrs: Attributes) -> UMLClass:
    cls = UMLClass(
        id=get_attribute(attrs, "xmi:id", element="packagedElement"),
        name=attrs.get("name"),
    )

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        if _is_typed(name, attrs, "ownedAttribute", "uml:Property"):
            cls.properties.append(_parse_property(cursor, attrs))
        elif _is_typed(name, attrs, "ownedRule", "uml:Constraint"):
            constraint = _parse_constraint(cursor, attrs)
            if constraint is not None:
                cls.constraints.append(constraint)

    descend(cursor, visit)
    return cls


def _parse_package(cursor: EventCursor, attrs: Attributes) -> UMLPackage:
    package = UMLPackage(
        id=get_attribute(attrs, "xmi:id", element="packagedElement"),
        name=attrs.get("name"),
    )

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        if _is_typed(name, attrs, "packagedElement", "uml:Class"):
            package.classes.append(_parse_class(cursor, attrs))

    descend(cursor, visit)
    return package


def _parse_model(cursor: EventCursor, attrs: Attributes) -> UMLModel:
    model = UMLModel(
        id=get_attribute(attrs, "xmi:id", element="uml:Model"),
        name=get_attribute(attrs, "name", element="uml:Model"),
    )

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        if _is_typed(name, attrs, "packagedElement", "uml:Package"):
            model.packages.append(_parse_package(cursor, attrs))

    descend(cursor, visit)
    return model


def _parse_modifier(
    name: str,
    attrs: Attributes,
    constraints_by_id: dict[str, UMLConstraint],
) -> UMLModifier | None:
    """Map one stereotype application to a modifier fact.

    Markers missing their attributes, or naming a constraint that is not a
    property-level constraint, are ignored.
    """
    if name == "SQLProfile:PrimaryKey" or name == "SQLProfile:Unique":
        constraint = constraints_by_id.get(attrs.get("base_Constraint", ""))
        if constraint is None or constraint.property_id is None:
            return None
        if name == "SQLProfile:Unique":
            return UniqueModifier(property_id=constraint.property_id)
        return PrimaryKeyModifier(property_id=constraint.property_id)

    if name == "SQLProfile:PKMember":
        if (property_id := attrs.get("base_Property")) is None:
            return None
        return PrimaryKeyModifier(property_id=property_id)

    if name == "SQLProfile:Column":
        property_id = attrs.get("base_Property")
        nullable = attrs.get("nullable")
        if property_id is None or nullable is None:
            return None
        return NullableModifier(property_id=property_id, nullable=nullable == "true")

    if name == "MagicDraw_Profile:typeModifier":
        property_id = attrs.get("base_Element")
        modifier = attrs.get("typeModifier")
        if property_id is None or modifier is None:
            return None
        return TypeModifier(property_id=property_id, modifier=modifier)

    if name == "SQLProfile:FK":
        from_id = attrs.get("members")
        to_id = attrs.get("referencedMembers")
        if from_id is None or to_id is None:
            return None
        return ForeignKeyModifier(from_property_id=from_id, to_property_id=to_id)

    return None


def parse_uml_model(stream: IO[bytes], *, document: str = "<uml model>") -> UMLDocument:
    """Parse the UML model document into its class tree and modifier facts.

    Raises:
        ArchiveError: On malformed or truncated XML, or a required id missing.
        ModelReferenceError: On an SQL check constraint without its class.
    """
    result = UMLDocument()
    constraints_by_id: dict[str, UMLConstraint] = {}
    cursor = EventCursor(stream, document=document)

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        if name == "uml:Model":
            model = _parse_model(cursor, attrs)
            result.models.append(model)
            for package in model.packages:
                for cls in package.classes:
                    for constraint in cls.constraints:
                        constraints_by_id.setdefault(constraint.id, constraint)
            return

        modifier = _parse_modifier(name, attrs, constraints_by_id)
        if modifier is not None:
            result.modifiers.append(modifier)

    scan(cursor, visit)

    log.debug(
        "uml_model_parsed",
        models=len(result.models),
        classes=sum(1 for _ in result.iter_classes()),
        modifiers=len(result.modifiers),
    )
    return result
