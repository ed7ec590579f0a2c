"""Tests for writing a TemplateOutput to disk."""

from __future__ import annotations

import os

import pytest

from zenuxs.scaffolder.errors import UnsafePathError
from zenuxs.scaffolder.materializer import materialize
from zenuxs.scaffolder.models import TemplateFile, TemplateOutput

pytestmark = pytest.mark.unit


@pytest.fixture
def output() -> TemplateOutput:
    return TemplateOutput(
        [
            TemplateFile(path="package.json", content="{}\n"),
            TemplateFile(path="src/deep/nested/index.js", content="export default 1\n"),
            TemplateFile(path="logs/.gitkeep", content=""),
            TemplateFile(path="public/logo.png", content=b"\x89PNG\r\n\x1a\n"),
        ]
    )


def _snapshot(root):
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


class TestMaterialize:
    def test_writes_every_file(self, tmp_path, output):
        root = tmp_path / "demo"
        written = materialize(root, output)

        assert [p.relative_to(root.resolve()).as_posix() for p in written] == output.paths()
        assert (root / "src/deep/nested/index.js").read_text(encoding="utf-8") == "export default 1\n"
        assert (root / "logs/.gitkeep").read_bytes() == b""

    def test_binary_written_verbatim(self, tmp_path, output):
        materialize(tmp_path, output)
        assert (tmp_path / "public/logo.png").read_bytes() == b"\x89PNG\r\n\x1a\n"

    def test_text_is_utf8_without_newline_translation(self, tmp_path):
        materialize(tmp_path, TemplateOutput([TemplateFile(path="a.md", content="café\nline\n")]))
        assert (tmp_path / "a.md").read_bytes() == "café\nline\n".encode("utf-8")

    def test_idempotent(self, tmp_path, output):
        root = tmp_path / "demo"
        materialize(root, output)
        first = _snapshot(root)
        materialize(root, output)
        assert _snapshot(root) == first

    def test_overwrites_existing_files(self, tmp_path):
        (tmp_path / "package.json").write_text("old", encoding="utf-8")
        materialize(tmp_path, TemplateOutput([TemplateFile(path="package.json", content="new")]))
        assert (tmp_path / "package.json").read_text(encoding="utf-8") == "new"

    def test_creates_missing_root(self, tmp_path):
        root = tmp_path / "a" / "b" / "c"
        materialize(root, TemplateOutput([TemplateFile(path="x.txt", content="x")]))
        assert (root / "x.txt").is_file()

    def test_empty_output(self, tmp_path):
        assert materialize(tmp_path / "empty", TemplateOutput()) == []
        assert (tmp_path / "empty").is_dir()

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_refuses_symlink_escape(self, tmp_path):
        root = tmp_path / "project"
        outside = tmp_path / "outside"
        root.mkdir()
        outside.mkdir()
        try:
            (root / "link").symlink_to(outside, target_is_directory=True)
        except OSError:
            pytest.skip("cannot create symlinks here")

        with pytest.raises(UnsafePathError):
            materialize(root, TemplateOutput([TemplateFile(path="link/evil.txt", content="x")]))
        assert not (outside / "evil.txt").exists()

    def test_io_errors_propagate(self, tmp_path):
        root = tmp_path / "project"
        root.mkdir()
        (root / "src").write_text("a file where a directory is needed", encoding="utf-8")
        with pytest.raises(OSError):
            materialize(root, TemplateOutput([TemplateFile(path="src/index.js", content="")]))
