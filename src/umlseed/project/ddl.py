"""DDL code-engineering document parser.

The code-engineering document records which UML classes and properties are
materialized into each DDL script. It carries no type information, only
id projections into the UML model document.

Structure (abridged):
<contents xsi:type="md.ce.ddl.rt.objects:DDLProjectObject">
  <modelElement xsi:type="uml:Model" href="...#<model-id>"/>
  <objects xsi:type="md.ce.rt.objects:RTComponent">
    <modelElement xsi:type="uml:Component" href="...#<script-id>"/>
    <objects xsi:type="md.ce.rt.objects:RTClassObject">
      <modelElement xsi:type="uml:Class" href="...#<class-id>"/>
      <objects xsi:type="md.ce.rt.objects:RTClassObject">
        <modelElement xsi:type="uml:Property" href="...#<property-id>"/>
      </objects>
    </objects>
  </objects>
</contents>
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO

from umlseed.core.errors import ModelReferenceError
from umlseed.core.logging import get_logger
from umlseed.project.cursor import (
    Attributes,
    EventCursor,
    descend,
    has_attribute,
    href_fragment,
    scan,
)

log = get_logger("project.ddl")

_PROJECT_TYPE = "md.ce.ddl.rt.objects:DDLProjectObject"
_COMPONENT_TYPE = "md.ce.rt.objects:RTComponent"
_CLASS_OBJECT_TYPE = "md.ce.rt.objects:RTClassObject"


@dataclass(slots=True)
class DDLClass:
    class_id: str
    property_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class DDLScript:
    script_id: str
    classes: list[DDLClass] = field(default_factory=list)


@dataclass(slots=True)
class DDLProject:
    model_id: str
    scripts: list[DDLScript] = field(default_factory=list)


def _is_model_element(name: str, attrs: Attributes, uml_type: str) -> bool:
    return name == "modelElement" and has_attribute(attrs, "xsi:type", uml_type)


def _is_object(name: str, attrs: Attributes, object_type: str) -> bool:
    return name == "objects" and has_attribute(attrs, "xsi:type", object_type)


def _parse_class(cursor: EventCursor) -> DDLClass:
    class_id: str | None = None
    property_ids: list[str] = []

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        nonlocal class_id
        if _is_model_element(name, attrs, "uml:Class") and class_id is None:
            class_id = href_fragment(attrs)
        elif _is_model_element(name, attrs, "uml:Property"):
            property_id = href_fragment(attrs)
            if property_id is None:
                raise ModelReferenceError.missing_reference("DDL property object", "property id")
            property_ids.append(property_id)

    descend(cursor, visit)

    if class_id is None:
        raise ModelReferenceError.missing_reference("DDL class object", "class id")
    return DDLClass(class_id=class_id, property_ids=property_ids)


def _parse_script(cursor: EventCursor) -> DDLScript:
    script_id: str | None = None
    classes: list[DDLClass] = []

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        nonlocal script_id
        if _is_model_element(name, attrs, "uml:Component") and script_id is None:
            script_id = href_fragment(attrs)
        elif _is_object(name, attrs, _CLASS_OBJECT_TYPE):
            classes.append(_parse_class(cursor))

    descend(cursor, visit)

    if script_id is None:
        raise ModelReferenceError.missing_reference("DDL script", "script id")
    return DDLScript(script_id=script_id, classes=classes)


def _parse_project(cursor: EventCursor) -> DDLProject:
    model_id: str | None = None
    scripts: list[DDLScript] = []

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        nonlocal model_id
        if _is_model_element(name, attrs, "uml:Model") and model_id is None:
            model_id = href_fragment(attrs)
        elif _is_object(name, attrs, _COMPONENT_TYPE):
            scripts.append(_parse_script(cursor))

    descend(cursor, visit)

    if model_id is None:
        raise ModelReferenceError.missing_reference("DDL project", "model id")
    return DDLProject(model_id=model_id, scripts=scripts)


def parse_ddl_projects(stream: IO[bytes], *, document: str = "<ddl>") -> list[DDLProject]:
    """Parse every DDL project container in the code-engineering document.

    Raises:
        ArchiveError: On malformed or truncated XML.
        ModelReferenceError: If a container lacks its model-element reference.
    """
    projects: list[DDLProject] = []
    cursor = EventCursor(stream, document=document)

    def visit(cursor: EventCursor, name: str, attrs: Attributes) -> None:
        if name == "contents" and has_attribute(attrs, "xsi:type", _PROJECT_TYPE):
            projects.append(_parse_project(cursor))

    scan(cursor, visit)

    log.debug(
        "ddl_parsed",
        projects=len(projects),
        scripts=sum(len(p.scripts) for p in projects),
    )
    return projects
