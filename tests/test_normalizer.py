"""Unit tests for declaration normalization."""

from __future__ import annotations

import pytest

from mongoose_ts.codegen.core.errors import NormalizationError
from mongoose_ts.codegen.core.extractor import extract_declaration
from mongoose_ts.codegen.core.materializer import parse_literal
from mongoose_ts.codegen.core.normalizer import normalize_declaration, render_literal

from .conftest import POST_MODEL, USER_MODEL


def test_normalizes_plain_declaration() -> None:
    text = "const userSchema = new Schema({ name: String, age: Number });"

    assert normalize_declaration(text) == '{ name: "string", age: "number" }'


def test_accepts_bare_object_literal() -> None:
    assert normalize_declaration("{ tags: [String] }") == '{ tags: ["string"] }'


@pytest.mark.parametrize(
    ("declared", "expected"),
    [
        ("String", '"string"'),
        ("'String'", '"string"'),
        ('""', '"string"'),
        ("Number", '"number"'),
        ("Boolean", '"boolean"'),
        ("Date", '"Date"'),
        ("Schema.Types.ObjectId", '"ObjectId"'),
        ("mongoose.Schema.Types.Decimal128", '"Decimal128"'),
        ("Schema.Types.Mixed", '"Mixed"'),
        ("[Date]", '["Date"]'),
        ("User", '"User"'),
        ("[User]", '["User"]'),
        ("{}", "{}"),
    ],
    ids=[
        "string",
        "quoted-string",
        "empty-string",
        "number",
        "boolean",
        "date",
        "object-id",
        "decimal",
        "mixed",
        "date-array",
        "reference",
        "reference-array",
        "empty-object",
    ],
)
def test_quotes_type_tokens(declared: str, expected: str) -> None:
    assert normalize_declaration(f"{{ field: {declared} }}") == f"{{ field: {expected} }}"


def test_discards_schema_options_and_generics() -> None:
    text = (
        "export const s: Schema<IUser> = new mongoose.Schema<IUser>("
        "{ name: String }, { timestamps: true, collection: 'users' });"
    )

    assert normalize_declaration(text) == '{ name: "string" }'


def test_keeps_date_now_default_as_text() -> None:
    text = "{ createdAt: { type: Date, default: Date.now }, seen: { type: Date, default: Date.now() } }"

    assert normalize_declaration(text) == (
        '{ createdAt: { type: "Date", default: "Date.now" }, '
        'seen: { type: "Date", default: "Date.now()" } }'
    )


def test_option_values_are_not_treated_as_types() -> None:
    text = "{ role: { type: String, enum: ['Admin', 'User'], default: 'User' } }"

    assert normalize_declaration(text) == (
        '{ role: { type: "string", enum: ["Admin", "User"], default: "User" } }'
    )


def test_expressions_become_opaque_strings() -> None:
    text = "{ name: { type: String, validate: (v) => v.length > 0, match: /^[a-z]+$/ } }"

    assert normalize_declaration(text) == (
        '{ name: { type: "string", validate: "(v) => v.length > 0", match: "/^[a-z]+$/" } }'
    )


def test_unwraps_nested_schema() -> None:
    text = "{ address: new Schema({ city: String, zip: Number }, { _id: false }) }"

    assert normalize_declaration(text) == '{ address: { city: "string", zip: "number" } }'


def test_ignores_spread_methods_and_comments() -> None:
    text = (
        "{\n"
        "  ...baseFields, // shared\n"
        "  /* display */ name: String,\n"
        "  get() { return 1; },\n"
        "}"
    )

    assert normalize_declaration(text) == '{ name: "string" }'


def test_quotes_non_identifier_keys() -> None:
    assert normalize_declaration("{ 'first-name': String }") == '{ "first-name": "string" }'


def test_output_is_a_literal() -> None:
    extracted = extract_declaration(POST_MODEL)
    assert extracted is not None

    value = parse_literal(normalize_declaration(extracted.text))

    assert list(value) == ["title", "tags", "author", "editor", "status", "meta"]
    assert value["author"] == {"type": "ObjectId", "ref": "User"}
    assert value["meta"] == {"views": "number", "likes": "number"}


@pytest.mark.parametrize(
    "source",
    [
        USER_MODEL,
        POST_MODEL,
        "const s = new Schema({ a: [[Number]], b: { c: [{ d: Date }] }, e: '' });",
        "const s = new Schema({ s: { type: String, enum: { values: ['a'], message: 'bad' } } });",
    ],
    ids=["user", "post", "nested-arrays", "enum-object"],
)
def test_normalization_is_idempotent(source: str) -> None:
    extracted = extract_declaration(source)
    assert extracted is not None

    once = normalize_declaration(extracted.text)

    assert normalize_declaration(once) == once


def test_render_literal_scalars() -> None:
    assert render_literal({"a": True, "b": None, "c": -1.5, "d": [1, "x"]}) == (
        '{ a: true, b: null, c: -1.5, d: [1, "x"] }'
    )


@pytest.mark.parametrize(
    "text",
    [
        "const s = new Schema({ name String });",
        "const s = new Schema({ name: String,, });",
        "const s = new Schema(definition);",
        "const s = new Schema({ name: 'open });",
    ],
    ids=["missing-colon", "double-comma", "no-object", "unterminated-string"],
)
def test_malformed_declaration_raises(text: str) -> None:
    with pytest.raises(NormalizationError) as exc_info:
        normalize_declaration(text)

    assert exc_info.value.text == text
    assert exc_info.value.pos is not None
