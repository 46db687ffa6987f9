"""DAW project files that reference the original media."""

from pathlib import Path
from typing import Protocol


class ProjectFile(Protocol):
    def render(self) -> str:
        """Full text of the project file."""
        ...

    def target_name(self) -> str:
        """File name the project should be saved under."""
        ...


def write_project(project: ProjectFile, directory: Path | None = None) -> Path:
    """Write *project* into *directory* (default: cwd) and return its path."""
    path = Path(directory or ".") / project.target_name()
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(project.render())
    return path
