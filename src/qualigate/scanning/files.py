"""Read-only view of a project's files, shared by the built-in analyzers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..logging_config import get_logger

logger = get_logger(__name__)

# Vendored, generated and tool-cache directories never count as project code.
SKIP_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "bower_components",
        "dist",
        "build",
        "out",
        "coverage",
        "htmlcov",
        "venv",
        ".venv",
        "env",
        "__pycache__",
        ".tox",
        ".nox",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        ".next",
        ".nuxt",
        ".cache",
        ".eggs",
        "vendor",
        "target",
    }
)

SOURCE_EXTENSIONS = frozenset(
    {".py", ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".vue", ".svelte", ".go", ".rs", ".java", ".rb"}
)

# Whole directory names that hold tests.
TEST_DIRS = frozenset({"test", "tests", "__tests__", "spec", "specs", "e2e"})


class ProjectFiles:
    """Lazily walks the project tree once and caches relative file paths.

    Directories in ``SKIP_DIRS`` (plus ``extra_skip_dirs``) and files
    larger than ``max_file_size`` bytes are ignored. Symlinks are not
    followed.
    """

    def __init__(
        self,
        root: Path | str,
        max_file_size: int = 2 * 1024 * 1024,
        extra_skip_dirs: Iterable[str] = (),
    ):
        self.root = Path(root)
        self.max_file_size = max_file_size
        self.skip_dirs = SKIP_DIRS | frozenset(extra_skip_dirs)
        self._paths: Optional[list[Path]] = None
        self._texts: dict[Path, str] = {}

    @property
    def paths(self) -> list[Path]:
        """All kept files, relative to root, in sorted order."""
        if self._paths is None:
            self._paths = sorted(self._walk())
            logger.debug(f"Indexed {len(self._paths)} files under {self.root}")
        return self._paths

    def _walk(self) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = [d for d in dirnames if d not in self.skip_dirs]
            base = Path(dirpath)
            for name in filenames:
                path = base / name
                try:
                    if path.is_symlink() or path.stat().st_size > self.max_file_size:
                        continue
                except OSError as e:
                    logger.debug(f"Cannot stat {path}: {e}")
                    continue
                yield path.relative_to(self.root)

    def source_files(self) -> list[Path]:
        return [p for p in self.paths if p.suffix in SOURCE_EXTENSIONS and not is_test_path(p)]

    def test_files(self) -> list[Path]:
        return [p for p in self.paths if p.suffix in SOURCE_EXTENSIONS and is_test_path(p)]

    def exists(self, *candidates: str) -> bool:
        """True if any candidate (file or directory, relative to root) exists."""
        return any((self.root / c).exists() for c in candidates)

    def first_existing(self, *candidates: str) -> Optional[str]:
        for c in candidates:
            if (self.root / c).exists():
                return c
        return None

    def read_text(self, path: Path | str) -> str:
        """File content, or "" when unreadable. Results are cached."""
        rel = Path(path)
        if rel not in self._texts:
            try:
                self._texts[rel] = (self.root / rel).read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.debug(f"Cannot read {rel}: {e}")
                self._texts[rel] = ""
        return self._texts[rel]

    def size(self, path: Path | str) -> int:
        try:
            return (self.root / path).stat().st_size
        except OSError:
            return 0

    def line_count(self, path: Path | str) -> int:
        text = self.read_text(path)
        return text.count("\n") + (1 if text and not text.endswith("\n") else 0)


def is_test_path(path: Path) -> bool:
    """True for files under a test directory or named like a test module.

    Names match as test_x.py, x_test.go, x.test.ts or x.spec.js; directory
    names must match whole, so latest/ or contest.py are not tests.
    """
    parts = [part.lower() for part in path.parts]
    if any(part in TEST_DIRS for part in parts[:-1]):
        return True
    name = parts[-1] if parts else ""
    stem = name.split(".", 1)[0]
    return (
        stem.startswith("test_")
        or stem.endswith("_test")
        or ".test." in name
        or ".spec." in name
    )
