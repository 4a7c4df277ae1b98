"""Pack a snapshot tree into a single deflated ZIP archive."""

from __future__ import annotations

import logging
import os
import zipfile
from datetime import date
from pathlib import Path

logger = logging.getLogger(__name__)

ARCHIVE_PREFIX = "backup-cluster"


class ArchiveError(OSError):
    """Raised when the source tree cannot be walked or the archive cannot be written."""


def archive_name(day: date | None = None) -> str:
    """backup-cluster-YYYY-MM-DD.zip for ``day`` (today by default)."""
    day = day or date.today()
    return f"{ARCHIVE_PREFIX}-{day.isoformat()}.zip"


def _walk_error(e: OSError) -> None:
    raise e


def pack(source_dir: Path, output_file: Path) -> Path:
    """Add every regular file under ``source_dir`` to ``output_file``.

    Entry names are relative to ``source_dir`` with forward slashes; directories
    get no entries of their own. On failure the partial archive is left behind.
    """
    source = Path(source_dir)
    output = Path(output_file)
    if not source.is_dir():
        raise ArchiveError(f"source directory {source} does not exist")

    output_resolved = output.resolve()
    count = 0
    try:
        with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for dirpath, dirnames, filenames in os.walk(source, onerror=_walk_error):
                dirnames.sort()
                for filename in sorted(filenames):
                    path = Path(dirpath) / filename
                    if not path.is_file() or path.resolve() == output_resolved:
                        continue
                    arcname = path.relative_to(source).as_posix().lstrip("/")
                    zf.write(path, arcname)
                    count += 1
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveError(f"failed to archive {source} into {output}: {e}") from e

    logger.info("Archived %d files from %s into %s", count, source, output)
    return output
