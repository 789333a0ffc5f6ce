"""
Discovery of specification files and parsing of their source paths.

Layout walked by find_spec_files:

    <source>/specification/<namespace>/resource-manager/<resource-namespace>/{stable|preview}/<version>/*.json
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .models import DiscoveryError, SourcePathError

logger = logging.getLogger(__name__)

SPECIFICATION_DIR = "specification"
RESOURCE_MANAGER_DIR = "resource-manager"
STABILITY_DIRS = ("stable", "preview")
PREVIEW = "preview"
SPEC_EXTENSION = ".json"

# Positions in a source path split on "/"; the source root is one segment
SPECIFICATION_SEGMENT_INDEX = 1
RESOURCE_MANAGER_SEGMENT_INDEX = 3
STABILITY_SEGMENT_INDEX = 5
VERSION_SEGMENT_INDEX = 6


def _list_dir(directory: Path) -> List[Path]:
    try:
        return sorted(directory.iterdir(), key=lambda entry: entry.name)
    except OSError as e:
        raise DiscoveryError(f"Cannot list directory {directory.as_posix()}: {e.strerror or e}") from e


def _subdirs(directory: Path) -> List[Path]:
    return [entry for entry in _list_dir(directory) if entry.is_dir()]


def find_spec_files(source_dir: str) -> List[str]:
    """Find all specification files under the resource-manager convention"""
    spec_root = Path(source_dir) / SPECIFICATION_DIR
    spec_files = []

    for namespace in _subdirs(spec_root):
        for resource_manager in _subdirs(namespace):
            if resource_manager.name != RESOURCE_MANAGER_DIR:
                continue
            for resource_namespace in _subdirs(resource_manager):
                for stability in _subdirs(resource_namespace):
                    if stability.name not in STABILITY_DIRS:
                        continue
                    for version in _subdirs(stability):
                        for entry in _list_dir(version):
                            if entry.suffix == SPEC_EXTENSION and entry.is_file():
                                spec_files.append(entry.as_posix())

    logger.debug("Discovered %d specification files under %s", len(spec_files), spec_root.as_posix())
    return spec_files


@dataclass(frozen=True)
class SourcePath:
    path: str
    stability: str
    version: str

    @property
    def is_preview(self) -> bool:
        return self.stability == PREVIEW


def parse_source_path(path: str) -> SourcePath:
    """Read the stability and version segments from their fixed positions"""
    segments = path.split("/")
    required = VERSION_SEGMENT_INDEX + 1
    layout = "<source>/specification/<namespace>/resource-manager/<resource-namespace>/<stability>/<version>"
    if len(segments) < required:
        raise SourcePathError(
            f"Source path {path!r} has {len(segments)} segments, expected at least {required} ({layout})"
        )
    if (segments[SPECIFICATION_SEGMENT_INDEX] != SPECIFICATION_DIR
            or segments[RESOURCE_MANAGER_SEGMENT_INDEX] != RESOURCE_MANAGER_DIR):
        raise SourcePathError(
            f"Source path {path!r} does not match {layout}; the source directory must be a single path segment"
        )
    return SourcePath(
        path=path,
        stability=segments[STABILITY_SEGMENT_INDEX],
        version=segments[VERSION_SEGMENT_INDEX],
    )
