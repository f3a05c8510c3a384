"""On-disk project store: one JSON blob per project id."""

import logging
import os
from pathlib import Path

from blazecut.errors import InvalidRequest, IoFailed
from blazecut.workspace import APP_NAMESPACE

logger = logging.getLogger(__name__)


def default_data_dir() -> Path:
    env = os.environ.get("BLAZECUT_DATA_DIR")
    if env:
        return Path(env)
    return Path.home() / ".local" / "share" / APP_NAMESPACE


class ProjectStore:
    def __init__(self, root: Path | None = None):
        self.root = Path(root) if root else default_data_dir()

    def _path(self, project_id: str) -> Path:
        if not project_id or "/" in project_id or "\\" in project_id or ".." in project_id:
            raise InvalidRequest(f"invalid project id {project_id!r}")
        return self.root / f"{project_id}.json"

    def save(self, project_id: str, content: str) -> Path:
        path = self._path(project_id)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise IoFailed(f"could not save project {project_id}: {e}") from e
        logger.info("Saved project %s", project_id)
        return path

    def load(self, project_id: str) -> str:
        path = self._path(project_id)
        if not path.exists():
            raise InvalidRequest(f"project {project_id} does not exist")
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise IoFailed(f"could not read project {project_id}: {e}") from e

    def list(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))

    def delete(self, project_id: str) -> None:
        path = self._path(project_id)
        if not path.exists():
            raise InvalidRequest(f"project {project_id} does not exist")
        try:
            path.unlink()
        except OSError as e:
            raise IoFailed(f"could not delete project {project_id}: {e}") from e
        logger.info("Deleted project %s", project_id)
