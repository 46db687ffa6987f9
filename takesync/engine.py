"""Orchestrator that runs the scan pipeline defined by a Manifest."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from takesync import discover, ffutil
from takesync.correlate import CandidateGroup, candidates
from takesync.daws import write_project
from takesync.daws.reaper import IncompleteMediaError, ReaperProject, project_for_group
from takesync.manifest import Manifest
from takesync.media import MediaItem

logger = logging.getLogger(__name__)


@dataclass
class GroupResult:
    group: CandidateGroup
    project: ReaperProject
    project_path: Path | None = None


@dataclass
class EngineResult:
    ffprobe_version: str | None = None
    items: list[MediaItem] = field(default_factory=list)
    groups: list[GroupResult] = field(default_factory=list)

    @property
    def incomplete_items(self) -> list[MediaItem]:
        return [item for item in self.items if not item.is_complete]


def _copied(items: list[MediaItem], root: Path | None = None) -> list[MediaItem] | None:
    copies = [discover.copy_to_temp(item, root) for item in items]
    if any(c is None for c in copies):
        return None
    return copies


def process(
    manifest: Manifest,
    on_progress: Callable[[str, float], None] | None = None,
    tmp_root: Path | None = None,
) -> EngineResult:
    """Execute the full scan pipeline.

    Args:
        manifest: Validated scan manifest.
        on_progress: Optional callback(stage_name, fraction_complete).
        tmp_root: Where temporary copies go when ``scan.copy_to_tmp`` is set.
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    ffutil.check_ffprobe()
    version = ffutil.ffprobe_version()

    _progress("Discovering media files", 0.0)
    paths = discover.media_paths(manifest.directories)

    _progress(f"Probing {len(paths)} files", 0.1)
    items = discover.load_media_items(paths, workers=manifest.scan.workers)

    _progress("Correlating takes", 0.6)
    groups = candidates(items)
    for item in items:
        if not item.is_complete:
            logger.info("%s: start/end unknown, not correlated", item.name)

    results: list[GroupResult] = []
    for i, group in enumerate(groups):
        _progress(f"Building project for {group.video.name}", 0.7 + 0.3 * i / len(groups))
        members = [group.video, *group.audios]
        if manifest.scan.copy_to_tmp:
            copies = _copied(members, tmp_root)
            if copies is None:
                logger.warning("Skipping %s: temporary copy failed", group.video.name)
                continue
            members = copies

        try:
            project = project_for_group(members[0], members[1:])
        except IncompleteMediaError as e:
            logger.warning("Skipping %s: %s", group.video.name, e)
            continue
        project_path = None
        if manifest.output.write_projects:
            manifest.output.output_dir.mkdir(parents=True, exist_ok=True)
            project_path = write_project(project, manifest.output.output_dir)
            logger.info("Wrote %s", project_path)
        results.append(GroupResult(group=group, project=project, project_path=project_path))

    _progress("Done", 1.0)
    return EngineResult(ffprobe_version=version, items=items, groups=results)
