"""Tests for the local filesystem capability."""

from __future__ import annotations

import gzip
import os
import stat
from collections.abc import Iterator
from pathlib import Path

import pytest

from scriptbundle.files import LocalFileSystem


@pytest.fixture
def umask_022() -> Iterator[None]:
    previous = os.umask(0o022)
    try:
        yield
    finally:
        os.umask(previous)


class TestResolve:
    def test_app_relative(self, tmp_path: Path) -> None:
        fs = LocalFileSystem(tmp_path)
        assert fs.resolve("~/js/app.js") == str(tmp_path / "js" / "app.js")

    def test_relative(self, tmp_path: Path) -> None:
        fs = LocalFileSystem(tmp_path)
        assert fs.resolve("js/app.js") == str(tmp_path / "js" / "app.js")

    def test_strips_query_string(self, tmp_path: Path) -> None:
        fs = LocalFileSystem(tmp_path)
        assert fs.resolve("~/js/app.js?v=3") == str(tmp_path / "js" / "app.js")

    def test_absolute_path_unchanged(self, tmp_path: Path) -> None:
        fs = LocalFileSystem(tmp_path / "root")
        target = tmp_path / "elsewhere.js"
        assert fs.resolve(str(target)) == str(target)


class TestExpand:
    def test_app_relative_uses_base_url(self) -> None:
        fs = LocalFileSystem(".", "/assets")
        assert fs.expand("~/js/app.js?v=1") == "/assets/js/app.js?v=1"

    def test_other_paths_unchanged(self) -> None:
        fs = LocalFileSystem(".", "/assets/")
        assert fs.expand("js/app.js") == "js/app.js"
        assert fs.expand("https://cdn.example.com/x.js") == "https://cdn.example.com/x.js"


class TestReadWrite:
    def test_write_creates_parents(self, tmp_path: Path) -> None:
        fs = LocalFileSystem(tmp_path)
        target = tmp_path / "deep" / "nested" / "out.js"

        fs.write(str(target), "var ü = 1;")

        assert fs.exists(str(target))
        assert fs.read(str(target)) == "var ü = 1;"

    def test_write_leaves_no_temp_files(self, tmp_path: Path) -> None:
        fs = LocalFileSystem(tmp_path)
        fs.write(str(tmp_path / "out.js"), "a")
        fs.write(str(tmp_path / "out.js"), "b")

        assert [p.name for p in tmp_path.iterdir()] == ["out.js"]
        assert fs.read(str(tmp_path / "out.js")) == "b"

    def test_exists_false_for_directories(self, tmp_path: Path) -> None:
        assert not LocalFileSystem(tmp_path).exists(str(tmp_path))

    def test_write_gzip(self, tmp_path: Path) -> None:
        fs = LocalFileSystem(tmp_path)
        fs.write_gzip(str(tmp_path / "out.js.gz"), "var a=1;")

        assert gzip.decompress((tmp_path / "out.js.gz").read_bytes()) == b"var a=1;"


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
@pytest.mark.usefixtures("umask_022")
class TestFileMode:
    def test_new_output_is_world_readable(self, tmp_path: Path) -> None:
        fs = LocalFileSystem(tmp_path)
        fs.write(str(tmp_path / "out.js"), "var a=1;")

        assert stat.S_IMODE((tmp_path / "out.js").stat().st_mode) == 0o644

    def test_gzip_output_is_world_readable(self, tmp_path: Path) -> None:
        fs = LocalFileSystem(tmp_path)
        fs.write_gzip(str(tmp_path / "out.js.gz"), "var a=1;")

        assert stat.S_IMODE((tmp_path / "out.js.gz").stat().st_mode) == 0o644

    def test_overwrite_keeps_existing_mode(self, tmp_path: Path) -> None:
        target = tmp_path / "out.js"
        target.write_text("old", encoding="utf-8")
        target.chmod(0o640)

        LocalFileSystem(tmp_path).write(str(target), "new")

        assert stat.S_IMODE(target.stat().st_mode) == 0o640
        assert target.read_text(encoding="utf-8") == "new"
