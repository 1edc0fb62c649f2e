"""
Package listing and tool version banner parsers.
"""

import re
from typing import Callable, Dict, Optional, Tuple

# Package manager name -> (command, args). Tried in this order.
PACKAGE_MANAGERS: Tuple[Tuple[str, str, Tuple[str, ...]], ...] = (
    ("dpkg", "dpkg", ("-l",)),
    ("rpm", "rpm", ("-qa",)),
    ("pacman", "pacman", ("-Q",)),
)


def count_packages(manager: str, stdout: str) -> int:
    """Count installed packages in a package manager listing.

    dpkg lists removed packages too; only rows in state 'ii' are installed.
    """
    lines = stdout.splitlines()
    if manager == "dpkg":
        return sum(1 for line in lines if line.startswith("ii"))
    return sum(1 for line in lines if line.strip())


def shell_name(shell_path: str) -> Optional[str]:
    """Basename of a $SHELL value."""
    shell_path = shell_path.strip()
    if not shell_path:
        return None
    return shell_path.rstrip("/").rsplit("/", 1)[-1] or shell_path


def _strip_prefix(prefix: str) -> Callable[[str], Optional[str]]:
    def parse(stdout: str) -> Optional[str]:
        text = stdout.strip()
        if not text:
            return None
        if text.startswith(prefix):
            text = text[len(prefix):]
        return text.strip() or None
    return parse


def _first_group(pattern: str, first_line_only: bool = False) -> Callable[[str], Optional[str]]:
    regex = re.compile(pattern)

    def parse(stdout: str) -> Optional[str]:
        text = stdout.split("\n", 1)[0] if first_line_only else stdout
        match = regex.search(text)
        return match.group(1) if match else None
    return parse


# Label -> (command, version parser). All are queried with --version.
TOOL_VERSIONS: Dict[str, Tuple[str, Callable[[str], Optional[str]]]] = {
    "Python": ("python3", _strip_prefix("Python ")),
    "Node.js": ("node", _strip_prefix("v")),
    "GCC": ("gcc", _first_group(r"gcc.*?(\d+\.\d+\.\d+)", first_line_only=True)),
    "Git": ("git", _first_group(r"git version ([\d.]+)")),
    "Docker": ("docker", _first_group(r"Docker version ([\d.]+)")),
}


def parse_tool_version(label: str, stdout: str) -> Optional[str]:
    """Extract the version string from a tool's `--version` banner."""
    _, parser = TOOL_VERSIONS[label]
    return parser(stdout)
