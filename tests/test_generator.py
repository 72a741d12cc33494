"""Tests for TypeScript interface rendering and the declaration file layout."""

from __future__ import annotations

from pathlib import Path

import pytest

from mongoose_ts.codegen import convert_source
from mongoose_ts.codegen.core.generator import generate_code
from mongoose_ts.codegen.core.schema import SchemaNameRegistry, build_field_tree
from mongoose_ts.codegen.core.templates import create_template_engine
from mongoose_ts.codegen.languages.typescript import (
    TSKind,
    TSType,
    TypeScriptGenerator,
    create_typescript_generator,
)
from mongoose_ts.codegen.registry import (
    RegistryError,
    get_generator,
    get_registry,
    list_supported_languages,
)


@pytest.mark.parametrize(
    ("declaration", "expected"),
    [
        ("{ name: String, age: Number }", ["  name: string;", "  age: number;"]),
        ("{ tags: [String] }", ["  tags: string[];"]),
        ('{ author: "User" }', ["  author: IUser;"]),
        (
            "{ address: { city: String, zip: Number } }",
            ["  address: { city: string; zip: number; };"],
        ),
    ],
    ids=["scenario-a", "scenario-b", "scenario-c", "scenario-d"],
)
def test_scenarios(registry: SchemaNameRegistry, declaration: str, expected: list[str]) -> None:
    source = f"const postSchema = new Schema({declaration});\n"

    result = convert_source(source, "post.model.js", registry=registry)

    assert result.converted
    assert result.interface_name == "IPost"
    lines = result.code.split("\n")
    assert lines[0] == "export interface IPost {"
    assert lines[1:-1] == expected
    assert lines[-1] == "}"


@pytest.mark.parametrize(
    ("declared", "rendered"),
    [
        ("Date", "Date"),
        ("Schema.Types.ObjectId", "ObjectId"),
        ("Schema.Types.Decimal128", "Decimal128"),
        ("Boolean", "boolean"),
        ("[Date]", "Date[]"),
        ("[[Number]]", "number[][]"),
        ("Schema.Types.Mixed", "any"),
        ("[]", "any[]"),
        ("{ type: String, enum: ['a', 'b'] }", '"a" | "b"'),
        ("[{ type: String, enum: ['a', 'b'] }]", '("a" | "b")[]'),
        ("{ type: Number, enum: [1, 2] }", "1 | 2"),
        ("Account", "unknown /* unresolved: Account */"),
        ("[Account]", "(unknown /* unresolved: Account */)[]"),
        ("[{ body: String }]", "{ body: string; }[]"),
    ],
)
def test_render_field_types(registry: SchemaNameRegistry, declared: str, rendered: str) -> None:
    result = convert_source(f"const s = new Schema({{ f: {declared} }});", "thing.js", registry=registry)

    assert f"  f: {rendered};" in result.code.split("\n")


def test_optional_and_quoted_properties() -> None:
    source = "const s = new Schema({ 'first-name': { type: String, required: false } });"

    result = convert_source(source, "user.js")

    assert '  "first-name"?: string;' in result.code.split("\n")


def test_unresolved_reference_warning(registry: SchemaNameRegistry) -> None:
    result = convert_source("const s = new Schema({ owner: Account });", "post.js", registry=registry)

    assert result.converted
    assert result.warnings == [
        "Unresolved reference 'Account' in field 'IPost.owner', using unknown"
    ]


def test_unresolved_name_cannot_close_its_comment(registry: SchemaNameRegistry) -> None:
    source = "const s = new Schema({ f: (/* legacy */ Number) });"

    result = convert_source(source, "post.js", registry=registry)

    line = next(line for line in result.code.split("\n") if line.startswith("  f:"))
    assert line == "  f: unknown /* unresolved: (/* legacy *\\/ Number) */;"
    assert line.count("*/") == 1


def test_literal_list_renders_as_string_array(registry: SchemaNameRegistry) -> None:
    source = 'const s = new Schema({ roles: ["admin", "editor"] });'

    result = convert_source(source, "post.js", registry=registry)

    assert "  roles: string[];" in result.code.split("\n")
    assert result.warnings == []


def test_ref_style_from_config(registry: SchemaNameRegistry) -> None:
    source = "const s = new Schema({ author: { type: Schema.Types.ObjectId, ref: 'User' } });"

    result = convert_source(source, "post.js", registry=registry, config={"ref_style": "union"})

    assert "  author: ObjectId | IUser;" in result.code.split("\n")


def test_interface_names(generator: TypeScriptGenerator) -> None:
    assert generator.interface_name("user") == "IUser"
    assert generator.interface_name("blog-post") == "IBlogPost"
    assert create_typescript_generator({"interface_prefix": ""}).interface_name("user") == "User"


def test_render_array_of_union(generator: TypeScriptGenerator) -> None:
    union = TSType(
        kind=TSKind.UNION,
        members=(TSType(kind=TSKind.PRIMITIVE, name="string"), TSType(kind=TSKind.PRIMITIVE, name="number")),
    )

    assert generator.render_type(TSType(kind=TSKind.ARRAY, element=union)) == "(string | number)[]"


def test_declaration_file_layout(generator: TypeScriptGenerator, registry: SchemaNameRegistry) -> None:
    model = generator.build_type_model("IUser", build_field_tree({"name": "string"}), registry)

    result = generate_code(generator, [model])

    assert result.success
    assert result.code == (
        "/**\n"
        " * Automatically generated by mongoose-ts\n"
        " *\n"
        " * Do not edit by hand, re-run mongoose-ts instead.\n"
        " */\n"
        "\n"
        '/** @mongoose-ts: formatted with options {"indent": 2, "use_tabs": false} */\n'
        "\n"
        'import { ObjectId, Decimal128 } from "bson";\n'
        "\n"
        "export interface IUser {\n"
        "  name: string;\n"
        "}\n"
    )
    assert result.metadata["schema_count"] == 1


def test_preamble_is_shared_by_all_interfaces(generator: TypeScriptGenerator, registry: SchemaNameRegistry) -> None:
    models = [
        generator.build_type_model("IUser", build_field_tree({"name": "string"}), registry),
        generator.build_type_model("IPost", build_field_tree({"author": "User"}), registry),
    ]

    code = generate_code(generator, models).code

    assert code.count("import {") == 1
    assert code.index("export interface IUser") < code.index("export interface IPost")
    assert "}\n\nexport interface IPost {\n  author: IUser;\n}\n" in code


def test_no_format_keeps_unformatted_text(registry: SchemaNameRegistry) -> None:
    generator = create_typescript_generator({"format_output": False, "indent_size": 4})
    model = generator.build_type_model("IUser", build_field_tree({"name": "string"}), registry)

    code = generate_code(generator, [model]).code

    assert "/** @mongoose-ts: generated with --no-format flag */" in code
    assert "    name: string;" in code


def test_format_code_uses_tabs(registry: SchemaNameRegistry) -> None:
    generator = create_typescript_generator({"use_tabs": True, "add_comments": False})

    code = generator.format_code(
        "export interface IUser {\n    name: string;   \n\n\n  meta: { a: string; };\n}"
    )

    assert code == "export interface IUser {\n\tname: string;\n\n\tmeta: { a: string; };\n}\n"


def test_custom_bson_module(registry: SchemaNameRegistry) -> None:
    generator = create_typescript_generator({"bson_module": "mongodb", "add_comments": False})
    model = generator.build_type_model("IUser", build_field_tree({"id": "ObjectId"}), registry)

    code = generate_code(generator, [model]).code

    assert code.startswith('import { ObjectId, Decimal128 } from "mongodb";\n')


def test_registry_lookup() -> None:
    assert isinstance(get_generator("ts"), TypeScriptGenerator)
    assert list_supported_languages() == ["typescript"]
    assert get_registry().get_generator_class("TS") is TypeScriptGenerator
    with pytest.raises(RegistryError, match="No generator registered"):
        get_generator("cobol")


def test_invalid_config_is_rejected() -> None:
    with pytest.raises(RegistryError, match="ref_style"):
        get_generator("typescript", {"ref_style": "embedded"})


def test_builtin_templates_are_registered(generator: TypeScriptGenerator) -> None:
    assert generator.template_engine.template_exists("ts_interface")
    assert generator.template_engine.template_exists("ts_file")
    assert not generator.template_engine.template_exists("ts_enum")


def test_template_directory_overrides_builtins(tmp_path: Path) -> None:
    (tmp_path / "ts_interface").write_text("interface {{ interface_name }} {}", encoding="utf-8")

    engine = create_template_engine(tmp_path)

    assert engine.render_template("ts_interface", {"interface_name": "IUser"}) == "interface IUser {}"
    assert engine.template_exists("ts_file")
    rendered = engine.render_template(
        "ts_file", {"comments": [], "imports": [], "module": "bson", "interfaces": ["x"]}
    )
    assert rendered == "\nx\n"
