"""Developer experience analyzer: README, contributing guide, editor config, CI."""

from __future__ import annotations

from ..models import AnalyzerResult, Category
from .base import AnalyzerContext, ScoreCard

README_NAMES = ("README.md", "README.rst", "README.txt", "README", "readme.md")
CONTRIBUTING_NAMES = ("CONTRIBUTING.md", "CONTRIBUTING.rst", ".github/CONTRIBUTING.md", "docs/CONTRIBUTING.md")
EDITOR_CONFIGS = (".editorconfig", ".vscode", ".idea", ".devcontainer")
TASK_RUNNERS = ("Makefile", "justfile", "Taskfile.yml", "noxfile.py", "tox.ini")
CI_CONFIGS = (
    ".github/workflows",
    ".gitlab-ci.yml",
    "Jenkinsfile",
    ".circleci",
    "azure-pipelines.yml",
    ".travis.yml",
    "bitbucket-pipelines.yml",
)

_README_SECTIONS = ("install", "usage", "example", "getting started", "develop")


class DevExpAnalyzer:
    """Checks (internal points out of 100):

        README present and substantive    30
        contributing guide                15
        editor config                     15
        scripts or task runner            15
        CI configuration                  25
    """

    category = Category.DEVEXP

    def run(self, context: AnalyzerContext) -> AnalyzerResult:
        card = ScoreCard(self.category, context.max_score)
        files = context.files

        readme = files.first_existing(*README_NAMES)
        card.metrics["readme"] = readme
        if readme is None:
            card.miss(
                30,
                "No README",
                "Write a README",
                "Explain what the project does, how to install it and how to run it.",
            )
        else:
            text = files.read_text(readme).lower()
            sections = sum(1 for s in _README_SECTIONS if s in text)
            card.award(10)
            card.partial(20, sections / 3)
            if sections < 3:
                card.issue("README lacks installation or usage sections")
                card.recommend(
                    "Document installation and usage in the README",
                    points=20 * (1 - sections / 3),
                )

        if files.exists(*CONTRIBUTING_NAMES):
            card.award(15)
        else:
            card.miss(15, "No contributing guide", "Add a CONTRIBUTING guide")

        if files.exists(*EDITOR_CONFIGS):
            card.award(15)
        else:
            card.miss(15, "No shared editor configuration", "Add an .editorconfig")

        has_scripts = (
            '"scripts"' in files.read_text("package.json")
            or "[project.scripts]" in files.read_text("pyproject.toml")
        )
        if has_scripts or files.exists(*TASK_RUNNERS):
            card.award(15)
        else:
            card.miss(15, "No scripts or task runner", "Provide task shortcuts (Makefile or npm scripts)")

        ci = files.first_existing(*CI_CONFIGS)
        card.metrics["ci"] = ci
        if ci:
            card.award(25)
        else:
            card.miss(
                25,
                "No CI configuration",
                "Set up continuous integration",
                "Run tests and quality gates on every push.",
            )

        return card.result()
