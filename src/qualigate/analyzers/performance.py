"""Performance analyzer: oversized sources and bundles, lockfiles, caching."""

from __future__ import annotations

from ..models import AnalyzerResult, Category, ProjectType
from .base import AnalyzerContext, ScoreCard

OVERSIZED_SOURCE_BYTES = 100 * 1024
OVERSIZED_ASSET_BYTES = 500 * 1024

LOCKFILES = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
    "poetry.lock",
    "uv.lock",
    "Pipfile.lock",
    "requirements.lock",
    "Cargo.lock",
    "go.sum",
    "Gemfile.lock",
)

_ASSET_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".mp4", ".webm", ".woff", ".ttf", ".svg")
_BUNDLER_CONFIGS = (
    "vite.config.js",
    "vite.config.ts",
    "webpack.config.js",
    "rollup.config.js",
    "next.config.js",
    "next.config.mjs",
)
_CACHE_HINTS = ("lru_cache", "functools.cache", "useMemo", "React.memo", "memoize", "Cache-Control")
_WEB_TYPES = (ProjectType.REACT_WEBAPP, ProjectType.VUE_WEBAPP)


class PerformanceAnalyzer:
    """Checks (internal points out of 100):

        no oversized source files     30
        no oversized static assets    20
        dependency lockfile           25
        caching or bundling hints     25
    """

    category = Category.PERFORMANCE

    def run(self, context: AnalyzerContext) -> AnalyzerResult:
        card = ScoreCard(self.category, context.max_score)
        files = context.files
        sources = files.source_files()

        oversized = [p for p in sources if files.size(p) > OVERSIZED_SOURCE_BYTES]
        card.metrics["oversized_sources"] = len(oversized)
        if not oversized:
            card.award(30)
        else:
            card.partial(30, 1 - len(oversized) / max(len(sources), 1) * 5)
            card.miss(
                15,
                f"{len(oversized)} source file(s) larger than 100 KB",
                "Break up or lazy-load oversized source files",
            )

        context.check_cancelled(self.category)

        assets = [
            p
            for p in files.paths
            if p.suffix.lower() in _ASSET_SUFFIXES
            and files.size(p) > OVERSIZED_ASSET_BYTES
        ]
        card.metrics["oversized_assets"] = len(assets)
        if not assets:
            card.award(20)
        else:
            card.miss(
                20,
                f"{len(assets)} static asset(s) larger than 500 KB",
                "Compress or optimize large static assets",
            )

        lockfile = files.first_existing(*LOCKFILES)
        card.metrics["lockfile"] = lockfile
        if lockfile:
            card.award(25)
        else:
            card.miss(
                25,
                "No dependency lockfile",
                "Commit a dependency lockfile",
                "Locked dependency versions give reproducible, cacheable installs.",
            )

        if context.project_type in _WEB_TYPES and files.exists(*_BUNDLER_CONFIGS):
            card.award(25)
            card.metrics["caching"] = "bundler"
        elif any(h in files.read_text(p) for p in sources[:500] for h in _CACHE_HINTS):
            card.award(25)
            card.metrics["caching"] = "code"
        else:
            card.metrics["caching"] = None
            card.miss(
                25,
                "No caching or memoization detected",
                "Cache expensive computations",
                "Memoize pure functions and configure HTTP caching where it applies.",
            )

        return card.result()
