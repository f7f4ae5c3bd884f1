"""CI output formats for quality gate reports."""

from ...exceptions import UnsupportedFormatError
from .base import CIFormat
from .console import ConsoleFormat
from .generic import GenericFormat, extract_recommendations
from .github_actions import GitHubActionsFormat
from .gitlab_ci import GitLabCIFormat
from .jenkins import JenkinsFormat

CI_FORMAT_CLASSES = {
    "github-actions": GitHubActionsFormat,
    "gitlab-ci": GitLabCIFormat,
    "jenkins": JenkinsFormat,
    "generic": GenericFormat,
    "console": ConsoleFormat,
}


def get_ci_format(name: str) -> CIFormat:
    """Get a CI format instance by name.

    Raises:
        UnsupportedFormatError: If name is not recognized
    """
    cls = CI_FORMAT_CLASSES.get(name)
    if cls is None:
        raise UnsupportedFormatError(name, CI_FORMAT_CLASSES)
    return cls()


__all__ = [
    "CIFormat",
    "ConsoleFormat",
    "GenericFormat",
    "GitHubActionsFormat",
    "GitLabCIFormat",
    "JenkinsFormat",
    "CI_FORMAT_CLASSES",
    "extract_recommendations",
    "get_ci_format",
]
