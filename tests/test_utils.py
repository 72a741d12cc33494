"""Tests for model file discovery and output helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from mongoose_ts.utils import (
    SourceLoadError,
    artifact_stem,
    collect_model_files,
    default_output_path,
    load_source_file,
    prepare_debug_dirs,
    write_text_file,
)


def test_collects_model_files_recursively(tmp_path: Path) -> None:
    for name in [
        "user.js",
        "nested/post.ts",
        "nested/deeper/comment.mjs",
        "index.d.ts",
        "README.md",
        "node_modules/mongoose/index.js",
        ".cache/tmp.js",
    ]:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("", encoding="utf-8")

    files = collect_model_files(tmp_path)

    assert [f.relative_to(tmp_path).as_posix() for f in files] == [
        "nested/deeper/comment.mjs",
        "nested/post.ts",
        "user.js",
    ]


def test_single_file_source(tmp_path: Path) -> None:
    path = tmp_path / "user.js"
    path.write_text("", encoding="utf-8")

    assert collect_model_files(path) == [path]
    assert default_output_path(path) == tmp_path / "index.d.ts"
    assert default_output_path(tmp_path) == tmp_path / "index.d.ts"


def test_missing_source_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        collect_model_files(tmp_path / "nope")


def test_load_source_file_errors(tmp_path: Path) -> None:
    with pytest.raises(SourceLoadError):
        load_source_file(tmp_path / "missing.js")


def test_write_text_file_line_endings(tmp_path: Path) -> None:
    path = write_text_file(tmp_path / "out" / "index.d.ts", "a\nb\n", "\r\n")

    assert path.read_bytes() == b"a\r\nb\r\n"


def test_debug_dirs(tmp_path: Path) -> None:
    dirs = prepare_debug_dirs(tmp_path / ".mongoose-ts")

    assert sorted(dirs) == ["json-clean", "json-raw", "typedefs"]
    assert all(d.is_dir() for d in dirs.values())
    assert artifact_stem("models/user.model.js") == "user.model"
