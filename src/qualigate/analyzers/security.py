"""Security analyzer: committed secrets, env files, ignore rules, lockfiles."""

from __future__ import annotations

import re

from ..logging_config import get_logger
from ..models import AnalyzerResult, Category
from .base import AnalyzerContext, ScoreCard
from .performance import LOCKFILES

logger = get_logger(__name__)

SECRET_PATTERNS = (
    re.compile(r"AKIA[0-9A-Z]{16}"),
    re.compile(r"-----BEGIN (?:RSA |EC |OPENSSH )?PRIVATE KEY-----"),
    re.compile(r"gh[pousr]_[A-Za-z0-9]{36}"),
    re.compile(r"xox[baprs]-[A-Za-z0-9-]{10,}"),
    re.compile(
        r"""(?i)\b(?:api[_-]?key|secret|password|passwd|token)\b\s*[:=]\s*["'][^"'\s]{8,}["']"""
    ),
)

_ENV_FILES = (".env", ".env.local", ".env.production", ".env.development")
_IGNORE_ENTRIES = (".env", "node_modules", "__pycache__", "*.pem", "*.key")


class SecurityAnalyzer:
    """Checks (internal points out of 100):

        no secret-looking literals      40
        no committed .env files         20
        .gitignore coverage             20
        dependency lockfile             20
    """

    category = Category.SECURITY

    def run(self, context: AnalyzerContext) -> AnalyzerResult:
        card = ScoreCard(self.category, context.max_score)
        files = context.files

        hits: list[str] = []
        for path in files.source_files():
            text = files.read_text(path)
            if any(p.search(text) for p in SECRET_PATTERNS):
                hits.append(str(path))
        card.metrics["secret_files"] = len(hits)
        if not hits:
            card.award(40)
        else:
            for path in hits:
                logger.debug(f"Possible secret in {path}")
            card.partial(40, 1 - len(hits) / 5)
            card.issue(f"Possible hard-coded secrets in {len(hits)} file(s): {', '.join(hits[:3])}")
            card.recommend(
                "Move secrets out of source code",
                "Load credentials from the environment or a secret manager and rotate exposed keys.",
                40 * min(1.0, len(hits) / 5),
            )

        context.check_cancelled(self.category)

        gitignore = files.read_text(".gitignore")
        ignored = {line.strip().rstrip("/") for line in gitignore.splitlines() if line.strip()}

        committed_env = [
            name for name in _ENV_FILES if files.exists(name) and name not in ignored
        ]
        card.metrics["committed_env_files"] = committed_env
        if not committed_env:
            card.award(20)
        else:
            card.miss(
                20,
                f"Environment files not ignored: {', '.join(committed_env)}",
                "Add .env files to .gitignore",
                "Commit a .env.example with placeholder values instead.",
            )

        if not gitignore:
            card.miss(20, "No .gitignore file", "Add a .gitignore file")
        else:
            covered = sum(1 for entry in _IGNORE_ENTRIES if entry in ignored)
            card.partial(20, 0.5 + covered / len(_IGNORE_ENTRIES) / 2)
            if ".env" not in ignored:
                card.issue(".gitignore does not exclude .env")

        if files.exists(*LOCKFILES):
            card.award(20)
        else:
            card.miss(
                20,
                "Dependencies are not locked",
                "Pin dependencies with a lockfile",
                "Locked versions make dependency audits meaningful.",
            )

        return card.result()
