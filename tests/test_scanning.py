"""Tests for the shared project file index."""

from pathlib import Path

from qualigate.scanning import ProjectFiles
from qualigate.scanning.files import is_test_path


class TestProjectFiles:
    def test_skips_vendored_directories(self, sample_project):
        files = ProjectFiles(sample_project)
        assert not any(p.parts[0] == "node_modules" for p in files.paths)

    def test_source_and_test_split(self, sample_project):
        files = ProjectFiles(sample_project)
        assert files.source_files() == [Path("src/app/__init__.py"), Path("src/app/core.py")]
        assert files.test_files() == [Path("tests/test_core.py")]

    def test_extra_skip_dirs(self, sample_project):
        files = ProjectFiles(sample_project, extra_skip_dirs=("src",))
        assert files.source_files() == []

    def test_oversized_files_ignored(self, tmp_path):
        (tmp_path / "big.py").write_text("x = 1\n" * 100)
        (tmp_path / "small.py").write_text("x = 1\n")
        files = ProjectFiles(tmp_path, max_file_size=100)
        assert files.paths == [Path("small.py")]

    def test_exists_and_first_existing(self, sample_project):
        files = ProjectFiles(sample_project)
        assert files.exists("nope", "LICENSE")
        assert not files.exists("COPYING")
        assert files.first_existing("README.rst", "README.md") == "README.md"
        assert files.first_existing("README.rst") is None

    def test_read_text_missing_file(self, tmp_path):
        assert ProjectFiles(tmp_path).read_text("missing.txt") == ""

    def test_size_missing_file(self, tmp_path):
        assert ProjectFiles(tmp_path).size("missing.txt") == 0

    def test_line_count(self, tmp_path):
        (tmp_path / "a.py").write_text("one\ntwo\nthree")
        (tmp_path / "b.py").write_text("one\ntwo\n")
        files = ProjectFiles(tmp_path)
        assert files.line_count("a.py") == 3
        assert files.line_count("b.py") == 2
        assert files.line_count("missing.py") == 0


class TestIsTestPath:
    def test_markers(self):
        assert is_test_path(Path("tests/helpers.py"))
        assert is_test_path(Path("pkg/test_core.py"))
        assert is_test_path(Path("web/app.spec.ts"))
        assert is_test_path(Path("src/__tests__/App.jsx"))

    def test_regular_source(self):
        assert not is_test_path(Path("src/app/core.py"))
        assert not is_test_path(Path("src/contest.py"))

    def test_name_suffix(self):
        assert is_test_path(Path("pkg/core_test.go"))
        assert is_test_path(Path("web/button.test.tsx"))

    def test_directories_match_whole_names(self):
        assert not is_test_path(Path("src/latest_news.py"))
        assert not is_test_path(Path("latest/app.py"))
        assert not is_test_path(Path("contest/app.py"))
        assert not is_test_path(Path("attestation/verify.py"))
        assert is_test_path(Path("app/Tests/unit/models.py"))
