"""Session reset: remove stored session data and pairing artifacts."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import shutil
from typing import Sequence

from journeybot.data.whatsapp_client import QR_PNG_PATH, QR_TEXT_PATH

logger = logging.getLogger(__name__)

REMOVED = "removed"
MISSING = "missing"
FAILED = "failed"

PAIRING_ARTIFACTS = (QR_PNG_PATH, QR_TEXT_PATH)


@dataclass(frozen=True)
class CleanupResult:
    """What happened to one path during a reset."""

    path: str
    status: str
    error: str | None = None


def _remove_path(path: Path) -> CleanupResult:
    if not path.exists() and not path.is_symlink():
        logger.info("Already absent: %s", path)
        return CleanupResult(str(path), MISSING)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        logger.error("Could not remove %s: %s", path, exc)
        return CleanupResult(str(path), FAILED, str(exc))
    logger.info("Removed %s", path)
    return CleanupResult(str(path), REMOVED)


def reset_session(
    session_path: str | Path,
    artifacts: Sequence[str | Path] = PAIRING_ARTIFACTS,
) -> list[CleanupResult]:
    """Delete the session directory and pairing artifacts; never raises on OS errors."""
    results = [_remove_path(Path(session_path))]
    results.extend(_remove_path(Path(artifact)) for artifact in artifacts)
    return results


__all__ = ["CleanupResult", "FAILED", "MISSING", "PAIRING_ARTIFACTS", "REMOVED", "reset_session"]
