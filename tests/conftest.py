"""Shared fixtures for mongoose-ts tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from mongoose_ts.codegen.core.schema import SchemaNameRegistry
from mongoose_ts.codegen.languages.typescript import (
    TypeScriptGenerator,
    create_typescript_generator,
)

USER_MODEL = """\
import mongoose, { Schema } from "mongoose";

const userSchema = new Schema(
  {
    name: String,
    email: { type: String, required: true },
    age: Number,
    nickname: { type: String, required: false },
    createdAt: { type: Date, default: Date.now },
  },
  { timestamps: true }
);

export default mongoose.model("User", userSchema);
"""

POST_MODEL = """\
import { Schema, model } from "mongoose";

interface IPostDoc {
  title: string;
}

export const postSchema: Schema<IPostDoc> = new Schema<IPostDoc>({
  title: String,
  tags: [String],
  author: { type: Schema.Types.ObjectId, ref: "User" },
  editor: User,
  status: { type: String, enum: ["draft", "published"] },
  meta: { views: Number, likes: Number },
});

export const Post = model<IPostDoc>("Post", postSchema);
"""

MALFORMED_MODEL = """\
const brokenSchema = new Schema({ name String });
"""

PLAIN_MODULE = """\
module.exports = { connect: () => null };
"""


@pytest.fixture
def generator() -> TypeScriptGenerator:
    return create_typescript_generator()


@pytest.fixture
def registry() -> SchemaNameRegistry:
    return SchemaNameRegistry({"User": "IUser", "Post": "IPost", "Comment": "IComment"})


@pytest.fixture
def write_model(tmp_path: Path):
    """Write a model file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / "models" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def models_dir(write_model) -> Path:
    """A models directory with two valid schemas and a plain module."""
    write_model("user.model.js", USER_MODEL)
    write_model("post.model.ts", POST_MODEL)
    return write_model("db.js", PLAIN_MODULE).parent
