"""
Tool classifier — map a tool name to the handler responsible for it.

Classification happens in two explicit steps:

    name ──(ordered keyword rules)──▶ ToolFamily ──(table)──▶ HandlerCategory

Rules are matched as lower-cased substrings, in group order:
languages, then package managers, then dev tools. The first match
wins, so "python-docker-sdk" is a language. Anything unmatched is
``ToolFamily.UNKNOWN`` and lands on the dev-tool handler.

Everything here is pure: the category is the dispatch key for which
synthesizer runs a step, so it must be deterministic.
"""

from __future__ import annotations

from enum import Enum

from devsetup.core.models.plan import HandlerCategory
from devsetup.core.models.request import ToolRequest


class ToolFamily(str, Enum):
    # languages
    NODE = "node"
    PYTHON = "python"
    JAVA = "java"
    RUBY = "ruby"
    GO = "go"
    RUST = "rust"
    PHP = "php"
    # package managers
    HOMEBREW = "homebrew"
    CHOCOLATEY = "chocolatey"
    WINGET = "winget"
    APT = "apt"
    YUM = "yum"
    # dev tools
    DOCKER = "docker"
    GIT = "git"
    VSCODE = "vscode"
    KUBECTL = "kubectl"
    TERRAFORM = "terraform"
    # other
    PROJECT = "project"
    UNKNOWN = "unknown"


# (keyword, family) in precedence order. Order inside a group matters
# too: "brew" must follow "homebrew", "choco" must follow "chocolatey".
LANGUAGE_RULES: tuple[tuple[str, ToolFamily], ...] = (
    ("node", ToolFamily.NODE),
    ("python", ToolFamily.PYTHON),
    ("java", ToolFamily.JAVA),
    ("ruby", ToolFamily.RUBY),
    ("go", ToolFamily.GO),
    ("rust", ToolFamily.RUST),
    ("php", ToolFamily.PHP),
)

PACKAGE_MANAGER_RULES: tuple[tuple[str, ToolFamily], ...] = (
    ("homebrew", ToolFamily.HOMEBREW),
    ("brew", ToolFamily.HOMEBREW),
    ("chocolatey", ToolFamily.CHOCOLATEY),
    ("choco", ToolFamily.CHOCOLATEY),
    ("winget", ToolFamily.WINGET),
    ("apt", ToolFamily.APT),
    ("yum", ToolFamily.YUM),
)

DEV_TOOL_RULES: tuple[tuple[str, ToolFamily], ...] = (
    ("docker", ToolFamily.DOCKER),
    ("git", ToolFamily.GIT),
    ("vscode", ToolFamily.VSCODE),
    ("kubectl", ToolFamily.KUBECTL),
    ("terraform", ToolFamily.TERRAFORM),
)

FAMILY_RULES: tuple[tuple[str, ToolFamily], ...] = (
    LANGUAGE_RULES + PACKAGE_MANAGER_RULES + DEV_TOOL_RULES
)

FAMILY_CATEGORY: dict[ToolFamily, HandlerCategory] = {
    **{family: HandlerCategory.LANGUAGE for _, family in LANGUAGE_RULES},
    **{family: HandlerCategory.PACKAGE_MANAGER for _, family in PACKAGE_MANAGER_RULES},
    **{family: HandlerCategory.IDE_TOOL for _, family in DEV_TOOL_RULES},
    ToolFamily.PROJECT: HandlerCategory.PROJECT,
    ToolFamily.UNKNOWN: HandlerCategory.IDE_TOOL,
}


def family_of(tool_name: str) -> ToolFamily:
    """Resolve a free-form tool name to its family."""
    lower = tool_name.lower()
    for keyword, family in FAMILY_RULES:
        if keyword in lower:
            return family
    return ToolFamily.UNKNOWN


def classify(tool_name: str) -> HandlerCategory:
    """Map a tool name to the handler category that owns it."""
    return FAMILY_CATEGORY[family_of(tool_name)]


def classify_request(request: ToolRequest) -> HandlerCategory:
    """Classify a parsed tool request, honouring an explicit category hint.

    A verification hint is ignored: verification is a step kind, not a
    tool kind, and the plan builder routes verify steps itself.
    """
    if request.category is not None and request.category != HandlerCategory.VERIFICATION:
        return request.category
    return classify(request.name)
