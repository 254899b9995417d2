"""Splitting large files into temporary parts for session uploads."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path

from dropbox_upload.models import ChunkPart

logger = logging.getLogger(__name__)

CHUNK_SIZE = 157_286_400  # 150 MiB
PART_PREFIX = "part"


def part_path(work_dir: Path, index: int, prefix: str = PART_PREFIX) -> Path:
    return work_dir / f"{prefix}_{index:05d}"


@contextlib.contextmanager
def split_file(
    source: str | Path,
    chunk_size: int = CHUNK_SIZE,
    work_dir: str | Path | None = None,
    *,
    prefix: str = PART_PREFIX,
) -> Iterator[list[ChunkPart]]:
    """Split source into chunk_size parts written to work_dir.

    Parts are named <prefix>_00000, <prefix>_00001, ... and only the last
    one may be shorter than chunk_size. Every part created is deleted when
    the block exits, whether it exits normally or with an exception.

    Example:
        with split_file("build.zip") as parts:
            for part in parts:
                send(part.local_path.read_bytes())
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    directory = Path(work_dir) if work_dir is not None else Path.cwd()

    parts: list[ChunkPart] = []
    created: list[Path] = []
    try:
        with open(source, "rb") as fh_in:
            while True:
                data = fh_in.read(chunk_size)
                if not data:
                    break
                path = part_path(directory, len(parts), prefix)
                created.append(path)
                path.write_bytes(data)
                parts.append(ChunkPart(local_path=path, size=len(data), index=len(parts)))
        yield parts
    finally:
        for path in created:
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Failed to delete temporary part {path}: {e}")
