"""Unit tests for schema declaration extraction."""

from __future__ import annotations

from mongoose_ts.codegen.core.extractor import extract_declaration

from .conftest import POST_MODEL, USER_MODEL


def test_extracts_declaration_with_options_argument() -> None:
    extracted = extract_declaration(USER_MODEL)

    assert extracted is not None
    assert extracted.variable_name == "userSchema"
    assert extracted.text.startswith("const userSchema = new Schema(")
    assert extracted.text.endswith("{ timestamps: true }\n);")
    assert USER_MODEL[extracted.start : extracted.end] == extracted.text


def test_extracts_typescript_declaration() -> None:
    extracted = extract_declaration(POST_MODEL)

    assert extracted is not None
    assert extracted.variable_name == "postSchema"
    assert extracted.text.startswith("export const postSchema: Schema<IPostDoc>")
    assert extracted.text.endswith("});")
    assert "model<IPostDoc>" not in extracted.text


def test_accepts_qualified_constructor_without_new() -> None:
    source = "let s = mongoose.Schema({ a: String })\nmodule.exports = s;\n"

    extracted = extract_declaration(source)

    assert extracted is not None
    assert extracted.text == "let s = mongoose.Schema({ a: String })"


def test_braces_inside_strings_and_comments_do_not_end_the_call() -> None:
    source = (
        "const s = new Schema({\n"
        '  note: { type: String, default: "})" },\n'
        "  // })\n"
        "  other: Number,\n"
        "});\n"
        "const after = 1;\n"
    )

    extracted = extract_declaration(source)

    assert extracted is not None
    assert extracted.text.endswith("other: Number,\n});")


def test_first_declaration_wins() -> None:
    source = (
        "const first = new Schema({ a: String });\n"
        "const second = new Schema({ b: Number });\n"
    )

    extracted = extract_declaration(source)

    assert extracted is not None
    assert extracted.variable_name == "first"


def test_returns_none_without_declaration() -> None:
    assert extract_declaration("module.exports = { a: 1 };\n") is None


def test_skips_call_without_object_literal() -> None:
    source = "const s = new Schema(definition);\n"

    assert extract_declaration(source) is None


def test_skips_unbalanced_call() -> None:
    source = "const s = new Schema({ a: String, b: { type: Number }\n"

    assert extract_declaration(source) is None
