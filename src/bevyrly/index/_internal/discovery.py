"""Source file discovery under a source root's configured source folder."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from bevyrly.config.models import IndexConfig

_BYTES_PER_MB = 1024 * 1024


@dataclass
class DiscoveryResult:
    files: list[Path] = field(default_factory=list)
    oversized: list[Path] = field(default_factory=list)
    missing_roots: list[Path] = field(default_factory=list)


def source_folder(root: Path, config: IndexConfig) -> Path:
    """Folder that is cataloged for ``root``."""
    return root / config.source_folder


def discover_sources(roots: list[Path], config: IndexConfig) -> DiscoveryResult:
    """List source files under each root's source folder.

    Files come back sorted per root, roots in the given order. Directories
    named in ``config.excluded_dirs`` are pruned.
    """
    result = DiscoveryResult()
    extensions = tuple(config.extensions)
    max_bytes = config.max_file_size_mb * _BYTES_PER_MB
    excluded = set(config.excluded_dirs)

    for root in roots:
        folder = source_folder(root, config)
        if not folder.is_dir():
            result.missing_roots.append(folder)
            continue

        found: list[Path] = []
        if config.recursive:
            for dirpath, dirnames, filenames in os.walk(folder):
                dirnames[:] = sorted(d for d in dirnames if d not in excluded)
                found.extend(Path(dirpath) / name for name in filenames)
        else:
            found.extend(p for p in folder.iterdir() if p.is_file())

        for path in sorted(found):
            if not path.name.endswith(extensions):
                continue
            try:
                size = path.stat().st_size
            except OSError:
                # Vanished between listing and stat; the read reports it
                size = 0
            if size > max_bytes:
                result.oversized.append(path)
                continue
            result.files.append(path)

    return result
