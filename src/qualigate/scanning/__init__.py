"""File-system scanning helpers for analyzers."""

from .files import SKIP_DIRS, SOURCE_EXTENSIONS, ProjectFiles, is_test_path

__all__ = ["ProjectFiles", "SKIP_DIRS", "SOURCE_EXTENSIONS", "is_test_path"]
