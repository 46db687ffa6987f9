"""JSON manifest schema, the contract between CLI/API and engine."""

import json
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ScanConfig:
    """How media files are discovered and probed."""

    workers: int = 4
    copy_to_tmp: bool = False


@dataclass
class OutputConfig:
    """Where and whether project files are written."""

    output_dir: Path = Path(".")
    write_projects: bool = True


@dataclass
class Manifest:
    """Top-level scan manifest."""

    directories: list[Path]
    version: str = "1"
    scan: ScanConfig = field(default_factory=ScanConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a manifest from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())

    if not data.get("directories"):
        raise ValueError("Manifest must contain a non-empty 'directories' list")

    scan = ScanConfig(**data["scan"]) if "scan" in data else ScanConfig()
    if scan.workers < 1:
        raise ValueError("scan.workers must be at least 1")

    output = OutputConfig()
    if "output" in data:
        out = data["output"]
        output = OutputConfig(
            output_dir=Path(out.get("output_dir", ".")),
            write_projects=out.get("write_projects", True),
        )

    return Manifest(
        version=data.get("version", "1"),
        directories=[Path(d) for d in data["directories"]],
        scan=scan,
        output=output,
    )
