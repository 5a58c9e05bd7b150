"""File writer for generated project files."""

import logging
from pathlib import Path

from ..constants import BACKUP_SUFFIX
from ..errors import BackupCollision, ReadFailed, WriteFailed
from ..models import OverwritePolicy, RunLog

logger = logging.getLogger(__name__)


def backup_path(path: Path) -> Path:
    """Return the ``<name>.bak`` sibling of path."""
    return path.with_name(path.name + BACKUP_SUFFIX)


def ensure_directory(path: Path) -> Path:
    """Create a directory and its parents if missing.

    Raises:
        WriteFailed: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteFailed(path, str(e)) from e
    return path


def read_file(path: Path) -> str:
    """Read a UTF-8 text file.

    Raises:
        ReadFailed: If the file cannot be read or is not valid UTF-8
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadFailed(path, str(e)) from e


def write_file(
    path: Path,
    content: str,
    policy: OverwritePolicy = OverwritePolicy.OVERWRITE,
    run_log: RunLog | None = None,
) -> int:
    """Write content to path according to the overwrite policy.

    Args:
        path: Destination file
        content: Text to write
        policy: Treatment of an existing destination
        run_log: Receives a file record on success

    Returns:
        Number of bytes written

    Raises:
        WriteFailed: If the destination exists under FAIL_IF_EXISTS, or on OS errors
        BackupCollision: If a backup is needed but ``<name>.bak`` already exists
    """
    ensure_directory(path.parent)
    data = content.encode("utf-8")

    if path.exists():
        if policy == OverwritePolicy.FAIL_IF_EXISTS:
            raise WriteFailed(path, "file already exists")
        if policy == OverwritePolicy.BACKUP_THEN_OVERWRITE:
            backup = backup_path(path)
            if backup.exists():
                raise BackupCollision(path, backup)
            try:
                path.rename(backup)
            except OSError as e:
                raise WriteFailed(path, f"backup failed: {e}") from e
            logger.debug(f"Backed up {path} to {backup}")

    try:
        path.write_bytes(data)
    except OSError as e:
        raise WriteFailed(path, str(e)) from e

    logger.debug(f"Wrote {path} ({len(data)} bytes)")
    if run_log is not None:
        run_log.record_file(str(path), len(data))
    return len(data)
