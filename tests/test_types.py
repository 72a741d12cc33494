"""Unit tests for TypeScript type mapping."""

from __future__ import annotations

import pytest

from mongoose_ts.codegen.core.schema import (
    FieldKind,
    FieldNode,
    PrimitiveTag,
    SchemaNameRegistry,
    build_field_tree,
)
from mongoose_ts.codegen.languages.typescript.types import (
    RefStyle,
    TSKind,
    TSTypeConfig,
    TSTypeMapper,
)


def ref_node(target: str = "User") -> FieldNode:
    return FieldNode(
        name="author",
        kind=FieldKind.REFERENCE,
        primitive=PrimitiveTag.OBJECT_ID,
        target=target,
        via_ref=True,
    )


@pytest.mark.parametrize(
    ("tag", "expected", "imports"),
    [
        (PrimitiveTag.STRING, "string", set()),
        (PrimitiveTag.NUMBER, "number", set()),
        (PrimitiveTag.BOOLEAN, "boolean", set()),
        (PrimitiveTag.DATE, "Date", set()),
        (PrimitiveTag.OBJECT_ID, "ObjectId", {"ObjectId"}),
        (PrimitiveTag.DECIMAL128, "Decimal128", {"Decimal128"}),
        (PrimitiveTag.MIXED, "any", set()),
    ],
    ids=lambda value: value.value if isinstance(value, PrimitiveTag) else None,
)
def test_primitive_mapping(tag: PrimitiveTag, expected: str, imports: set) -> None:
    mapper = TSTypeMapper()
    node = FieldNode(name="f", kind=FieldKind.PRIMITIVE, primitive=tag)

    ts_type = mapper.map_field_type(node, SchemaNameRegistry())

    assert ts_type.kind == TSKind.PRIMITIVE
    assert ts_type.name == expected
    assert set(ts_type.imports_needed) == imports


def test_type_overrides() -> None:
    mapper = TSTypeMapper(TSTypeConfig(type_overrides={PrimitiveTag.DATE: "string"}))

    assert mapper.primitive_type(PrimitiveTag.DATE).name == "string"


def test_array_carries_element_imports() -> None:
    mapper = TSTypeMapper()
    tree = build_field_tree({"ids": ["ObjectId"]})

    interface = mapper.map_interface("IThing", tree, SchemaNameRegistry())

    ids = interface.fields[0].type
    assert ids.kind == TSKind.ARRAY
    assert ids.element.name == "ObjectId"
    assert interface.imports_needed == {"ObjectId"}


def test_registered_reference_becomes_named_type(registry: SchemaNameRegistry) -> None:
    mapper = TSTypeMapper()
    node = FieldNode(name="author", kind=FieldKind.REFERENCE, target="User")

    ts_type = mapper.map_field_type(node, registry)

    assert ts_type.kind == TSKind.NAMED
    assert ts_type.name == "IUser"


def test_unregistered_reference_is_unresolved(registry: SchemaNameRegistry) -> None:
    mapper = TSTypeMapper()
    tree = build_field_tree({"owner": "Account"})

    interface = mapper.map_interface("IPost", tree, registry)

    owner = interface.fields[0].type
    assert owner.kind == TSKind.UNRESOLVED
    assert owner.name == "Account"
    assert interface.validation_hints == [
        "Unresolved reference 'Account' in field 'IPost.owner', using unknown"
    ]


@pytest.mark.parametrize(
    ("style", "kind", "rendered_names"),
    [
        (RefStyle.INTERFACE, TSKind.NAMED, ["IUser"]),
        (RefStyle.UNION, TSKind.UNION, ["ObjectId", "IUser"]),
        (RefStyle.ID, TSKind.PRIMITIVE, ["ObjectId"]),
    ],
    ids=["interface", "union", "id"],
)
def test_ref_styles(registry: SchemaNameRegistry, style: RefStyle, kind: TSKind, rendered_names) -> None:
    mapper = TSTypeMapper(TSTypeConfig(ref_style=style))

    ts_type = mapper.map_field_type(ref_node(), registry)

    assert ts_type.kind == kind
    names = [m.name for m in ts_type.members] if ts_type.members else [ts_type.name]
    assert names == rendered_names


def test_id_style_never_reports_unresolved(registry: SchemaNameRegistry) -> None:
    mapper = TSTypeMapper(TSTypeConfig(ref_style=RefStyle.ID))

    ts_type = mapper.map_field_type(ref_node("Unknown"), registry)

    assert ts_type.kind == TSKind.PRIMITIVE
    assert ts_type.validation_hints == ()


def test_nested_fields_keep_order_and_optionality(registry: SchemaNameRegistry) -> None:
    mapper = TSTypeMapper()
    tree = build_field_tree(
        {"address": {"city": "string", "zip": {"type": "number", "required": False}}}
    )

    interface = mapper.map_interface("IUser", tree, registry)

    address = interface.fields[0].type
    assert address.kind == TSKind.OBJECT
    assert [(f.name, f.optional) for f in address.fields] == [("city", False), ("zip", True)]
    assert interface.to_dict()["fields"]["address"]["type"]["kind"] == "object"
