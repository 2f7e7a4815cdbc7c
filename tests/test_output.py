"""Tests for the staging output writer."""

import pytest

from inkpress.errors import WriteError
from inkpress.output import OutputWriter


class TestOutputWriter:
    def test_commit_replaces_previous_output(self, tmp_path) -> None:
        output = tmp_path / "dist"
        output.mkdir()
        (output / "stale.html").write_text("old")
        with OutputWriter(output, tmp_path) as writer:
            writer.write_text("index.html", "<p>new</p>")
            assert not (output / "index.html").exists()
        assert (output / "index.html").read_text() == "<p>new</p>"
        assert (output / "posts").is_dir()
        assert not (output / "stale.html").exists()
        assert sorted(p.name for p in tmp_path.iterdir()) == ["dist"]

    def test_failure_keeps_previous_output(self, tmp_path) -> None:
        output = tmp_path / "dist"
        output.mkdir()
        (output / "index.html").write_text("old")
        with pytest.raises(RuntimeError):
            with OutputWriter(output, tmp_path) as writer:
                writer.write_text("index.html", "new")
                raise RuntimeError("boom")
        assert (output / "index.html").read_text() == "old"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["dist"]

    def test_refuses_project_root(self, tmp_path) -> None:
        with pytest.raises(WriteError):
            OutputWriter(tmp_path, tmp_path)

    def test_refuses_outside_root(self, tmp_path) -> None:
        with pytest.raises(WriteError):
            OutputWriter(tmp_path.parent / "elsewhere", tmp_path)

    def test_write_before_open(self, tmp_path) -> None:
        with pytest.raises(WriteError):
            OutputWriter(tmp_path / "dist", tmp_path).write_text("a.html", "x")


class TestCopyAssets:
    def test_copies_present_assets(self, tmp_path) -> None:
        (tmp_path / "styles.css").write_text("body {\n  margin: 0;\n}\n")
        (tmp_path / "images").mkdir()
        (tmp_path / "images" / "cover.png").write_bytes(b"png")
        (tmp_path / "robots.txt").write_text("User-agent: *\n")
        (tmp_path / "favicon.ico").write_bytes(b"ico")
        with OutputWriter(tmp_path / "dist", tmp_path) as writer:
            copied = writer.copy_assets(tmp_path, css_filter=str.upper)
        dist = tmp_path / "dist"
        assert copied == ["styles.css", "images/", "robots.txt", "images/favicon.ico"]
        assert (dist / "styles.css").read_text().startswith("BODY {")
        assert (dist / "images" / "cover.png").read_bytes() == b"png"
        assert (dist / "images" / "favicon.ico").read_bytes() == b"ico"
        assert not (dist / "site.webmanifest").exists()

    def test_missing_assets_are_skipped(self, tmp_path) -> None:
        with OutputWriter(tmp_path / "dist", tmp_path) as writer:
            assert writer.copy_assets(tmp_path) == []

    def test_unreadable_present_asset_raises(self, tmp_path) -> None:
        (tmp_path / "styles.css").write_bytes(b"\xff\xfe\x00")
        with pytest.raises(WriteError):
            with OutputWriter(tmp_path / "dist", tmp_path) as writer:
                writer.copy_assets(tmp_path)
        assert not (tmp_path / "dist").exists()
