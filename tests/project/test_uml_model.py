"""Tests for project/uml_model.py module.

Covers:
- Class tree parsing (model, package, class, property, constraint)
- Modifier facts (PKMember, PrimaryKey, Column, typeModifier, FK, Unique)
- SQL check constraints
"""

from __future__ import annotations

import io

import pytest

from umlseed.core.errors import ArchiveError, ErrorCode, ModelReferenceError
from umlseed.project.uml_model import (
    ForeignKeyModifier,
    NullableModifier,
    PrimaryKeyModifier,
    TypeModifier,
    UMLDocument,
    UniqueModifier,
    parse_uml_model,
)

HEADER = (
    '<xmi:XMI xmlns:xmi="urn:xmi" xmlns:uml="urn:uml" '
    'xmlns:SQLProfile="urn:sql" xmlns:MagicDraw_Profile="urn:md">'
)


def _document(body: str, modifiers: str = "") -> UMLDocument:
    xml = (
        HEADER
        + '<uml:Model xmi:id="m" name="Data">'
        + '<packagedElement xmi:type="uml:Package" xmi:id="pkg" name="Schema">'
        + body
        + "</packagedElement></uml:Model>"
        + modifiers
        + "</xmi:XMI>"
    )
    return parse_uml_model(io.BytesIO(xml.encode()), document="model")


USERS = (
    '<packagedElement xmi:type="uml:Class" xmi:id="c_users" name="users">'
    '<ownedAttribute xmi:type="uml:Property" xmi:id="p_id" name="id" isID="true">'
    '<type href="SQL2011.mdzip#t_int"/><type href="SQL2011.mdzip#t_other"/>'
    "</ownedAttribute>"
    '<ownedAttribute xmi:type="uml:Property" xmi:id="p_name" name="name">'
    '<type href="SQL2011.mdzip#t_varchar"/>'
    "</ownedAttribute>"
    '<ownedAttribute xmi:type="uml:Property" xmi:id="p_untyped" name="notes"/>'
    "</packagedElement>"
)


class TestClassTree:
    """Tests for model/package/class/property parsing."""

    def test_parses_model_hierarchy(self) -> None:
        """Model, package and class are nested as in the document."""
        # Given / When
        doc = _document(USERS)

        # Then
        assert len(doc.models) == 1
        model = doc.models[0]
        assert (model.id, model.name) == ("m", "Data")
        assert [p.name for p in model.packages] == ["Schema"]
        assert [c.name for c in doc.iter_classes()] == ["users"]

    def test_parses_properties(self) -> None:
        """Properties keep declaration order, id flag and first type href."""
        doc = _document(USERS)
        cls = next(doc.iter_classes())

        assert [p.id for p in cls.properties] == ["p_id", "p_name", "p_untyped"]
        first = cls.properties[0]
        assert first.is_id is True
        assert first.type_href == "SQL2011.mdzip#t_int"
        assert cls.properties[1].is_id is False
        assert cls.properties[2].type_href is None

    def test_used_type_hrefs(self) -> None:
        """Type references are harvested from parsed properties only."""
        doc = _document(USERS)
        assert doc.used_type_hrefs() == {"SQL2011.mdzip#t_int", "SQL2011.mdzip#t_varchar"}

    def test_ignores_elements_outside_the_expected_types(self) -> None:
        """Non-class packaged elements and non-property attributes are skipped."""
        body = (
            '<packagedElement xmi:type="uml:Association" xmi:id="a1"/>'
            '<packagedElement xmi:type="uml:Class" xmi:id="c1" name="t">'
            '<ownedAttribute xmi:type="uml:Port" xmi:id="port"/>'
            "</packagedElement>"
        )
        doc = _document(body)
        classes = list(doc.iter_classes())
        assert [c.id for c in classes] == ["c1"]
        assert classes[0].properties == []

    def test_class_without_name_is_kept(self) -> None:
        """A nameless class parses; the assembler decides whether it is fatal."""
        doc = _document('<packagedElement xmi:type="uml:Class" xmi:id="c1"/>')
        assert next(doc.iter_classes()).name is None

    def test_missing_id_raises(self) -> None:
        """Properties must carry an xmi:id."""
        body = (
            '<packagedElement xmi:type="uml:Class" xmi:id="c1" name="t">'
            '<ownedAttribute xmi:type="uml:Property" name="x"/>'
            "</packagedElement>"
        )
        with pytest.raises(ArchiveError) as exc_info:
            _document(body)
        assert exc_info.value.code == ErrorCode.ARCHIVE_ATTRIBUTE_MISSING

    def test_truncated_document_raises(self) -> None:
        """A document ending inside the model is fatal."""
        xml = HEADER + '<uml:Model xmi:id="m" name="Data"><packagedElement xmi:type="uml:Package" xmi:id="p">'
        with pytest.raises(ArchiveError) as exc_info:
            parse_uml_model(io.BytesIO(xml.encode()))
        assert exc_info.value.code == ErrorCode.ARCHIVE_END_OF_DOCUMENT


def _rule(rule_id: str, constrained: str | None, body: str | None, language: str | None) -> str:
    parts = [f'<ownedRule xmi:type="uml:Constraint" xmi:id="{rule_id}">']
    if constrained is not None:
        parts.append(f'<constrainedElement xmi:idref="{constrained}"/>')
    parts.append('<specification xmi:type="uml:OpaqueExpression">')
    if body is not None:
        parts.append(f"<body>{body}</body>")
    if language is not None:
        parts.append(f"<language>{language}</language>")
    parts.append("</specification></ownedRule>")
    return "".join(parts)


def _class_with_rules(*rules: str) -> str:
    return (
        '<packagedElement xmi:type="uml:Class" xmi:id="c1" name="users">'
        '<ownedAttribute xmi:type="uml:Property" xmi:id="p1" name="role">'
        '<type href="SQL2011.mdzip#t_char"/></ownedAttribute>'
        + "".join(rules)
        + "</packagedElement>"
    )


class TestConstraints:
    """Tests for ownedRule parsing."""

    def test_sql_check_becomes_class_level_constraint(self) -> None:
        """An SQL body '<prop> in <list>' names its property and keeps 'in <list>'."""
        doc = _document(_class_with_rules(_rule("r1", "c1", "role in ('a', 'b')", "SQL")))
        constraint = next(doc.iter_classes()).constraints[0]

        assert constraint.class_id == "c1"
        assert constraint.property_name == "role"
        assert constraint.body == "in ('a', 'b')"
        assert constraint.property_id is None

    def test_non_sql_constraint_is_property_level(self) -> None:
        """Without an SQL check body the constrained element is a property id."""
        doc = _document(_class_with_rules(_rule("r1", "p1", None, None)))
        constraint = next(doc.iter_classes()).constraints[0]

        assert constraint.property_id == "p1"
        assert constraint.body is None

    def test_sql_language_without_separator_is_property_level(self) -> None:
        """SQL bodies that are not 'x in y' do not become checks."""
        doc = _document(_class_with_rules(_rule("r1", "p1", "role &lt;&gt; ''", "SQL")))
        assert next(doc.iter_classes()).constraints[0].property_id == "p1"

    def test_constraint_without_target_is_discarded(self) -> None:
        """A non-check rule without constrainedElement carries no information."""
        doc = _document(_class_with_rules(_rule("r1", None, None, "OCL")))
        assert next(doc.iter_classes()).constraints == []

    def test_sql_check_without_target_raises(self) -> None:
        """An SQL check must point at its class."""
        with pytest.raises(ModelReferenceError) as exc_info:
            _document(_class_with_rules(_rule("r1", None, "role in ('a')", "SQL")))
        assert exc_info.value.code == ErrorCode.REFERENCE_MISSING


class TestModifiers:
    """Tests for stereotype applications at document root."""

    def test_collects_modifier_facts(self) -> None:
        """Every recognized marker becomes one fact, in document order."""
        modifiers = (
            '<SQLProfile:PKMember xmi:id="s1" base_Property="p1"/>'
            '<SQLProfile:Column xmi:id="s2" base_Property="p1" nullable="true"/>'
            '<SQLProfile:Column xmi:id="s3" base_Property="p2" nullable="false"/>'
            '<MagicDraw_Profile:typeModifier xmi:id="s4" base_Element="p2" typeModifier="(50)"/>'
            '<SQLProfile:FK xmi:id="s5" members="p3" referencedMembers="p1"/>'
        )
        doc = _document(USERS, modifiers)

        assert doc.modifiers == [
            PrimaryKeyModifier("p1"),
            NullableModifier("p1", True),
            NullableModifier("p2", False),
            TypeModifier("p2", "(50)"),
            ForeignKeyModifier("p3", "p1"),
        ]

    def test_primary_key_via_constraint(self) -> None:
        """SQLProfile:PrimaryKey points at a constraint whose target is the property."""
        body = _class_with_rules(_rule("r1", "p1", None, None))
        doc = _document(body, '<SQLProfile:PrimaryKey xmi:id="s1" base_Constraint="r1"/>')
        assert doc.modifiers == [PrimaryKeyModifier("p1")]

    def test_unique_via_constraint(self) -> None:
        body = _class_with_rules(_rule("r1", "p1", None, None))
        doc = _document(body, '<SQLProfile:Unique xmi:id="s1" base_Constraint="r1"/>')
        assert doc.modifiers == [UniqueModifier("p1")]

    def test_primary_key_with_unknown_constraint_ignored(self) -> None:
        doc = _document(USERS, '<SQLProfile:PrimaryKey xmi:id="s1" base_Constraint="nope"/>')
        assert doc.modifiers == []

    @pytest.mark.parametrize(
        "marker",
        [
            '<SQLProfile:PKMember xmi:id="s"/>',
            '<SQLProfile:Column xmi:id="s" base_Property="p1"/>',
            '<MagicDraw_Profile:typeModifier xmi:id="s" base_Element="p1"/>',
            '<SQLProfile:FK xmi:id="s" members="p1"/>',
            '<SQLProfile:Index xmi:id="s" base_Property="p1"/>',
        ],
    )
    def test_incomplete_or_unknown_markers_ignored(self, marker: str) -> None:
        """Markers missing attributes, and unknown markers, produce no fact."""
        assert _document(USERS, marker).modifiers == []
