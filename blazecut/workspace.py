"""Per-run working directories and temp-file housekeeping."""

import logging
import os
import tempfile
import time
import uuid
from pathlib import Path

from blazecut.errors import InvalidRequest, IoFailed

logger = logging.getLogger(__name__)

APP_NAMESPACE = "blazecut"
TEMP_MARKERS = ("temp", "tmp", APP_NAMESPACE)


def run_id() -> str:
    """Unique across processes sharing a temp root."""
    return f"{time.time_ns()}_{uuid.uuid4().hex[:8]}"


class Workspace:
    """Directory owning every intermediate artifact of one pipeline run.

    Paths handed out by :meth:`path` are remembered and removed by
    :meth:`cleanup`, which never raises.
    """

    def __init__(self, root: Path | None = None):
        self.run_id = run_id()
        try:
            self.dir = Path(
                tempfile.mkdtemp(prefix=f"{APP_NAMESPACE}_{self.run_id}_", dir=root)
            )
        except OSError as e:
            raise IoFailed(f"could not create working directory: {e}") from e
        self._tracked: list[Path] = []

    def path(self, name: str) -> Path:
        p = self.dir / name
        self.track(p)
        return p

    def track(self, path: Path) -> Path:
        if path not in self._tracked:
            self._tracked.append(path)
        return path

    @property
    def tracked(self) -> list[Path]:
        return list(self._tracked)

    def cleanup(self) -> None:
        for p in self._tracked:
            try:
                p.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Could not remove %s: %s", p, e)
        self._tracked.clear()
        try:
            self.dir.rmdir()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove working directory %s: %s", self.dir, e)

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(self, *exc) -> None:
        self.cleanup()


def is_temp_path(path: str | Path) -> bool:
    text = str(path).lower()
    return any(marker in text for marker in TEMP_MARKERS)


def clean_temp_file(path: str | Path) -> None:
    """Delete a temp file; paths outside the temp/app namespace are refused."""
    if not is_temp_path(path):
        raise InvalidRequest(f"refusing to delete non-temporary path {path}")
    logger.info("Removing temp file %s", path)
    try:
        os.remove(path)
    except OSError as e:
        raise IoFailed(f"could not remove {path}: {e}") from e
