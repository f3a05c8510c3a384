"""Shared test fixtures."""

from pathlib import Path
from unittest.mock import patch

import pytest

from blazecut.ffutil import RunOutcome

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_request_path() -> Path:
    return FIXTURES_DIR / "sample_request.json"


class FakeRunner:
    """Stands in for ffmpeg: records commands and writes each output file.

    Any command containing ``fail_on`` exits 1 after leaving a partial output.
    Concat list contents are captured before the pipeline deletes them.
    """

    def __init__(self, fail_on: str | None = None, stderr: str = "boom"):
        self.fail_on = fail_on
        self.stderr = stderr
        self.commands: list[list[str]] = []
        self.concat_lists: list[list[str]] = []

    def __call__(self, cmd: list[str]) -> RunOutcome:
        self.commands.append(cmd)
        output = Path(cmd[-1])
        if "concat" in cmd and "-f" in cmd:
            list_path = Path(cmd[cmd.index("-i") + 1])
            self.concat_lists.append(list_path.read_text().splitlines())
        if self.fail_on and self.fail_on in " ".join(cmd):
            output.write_bytes(b"partial")
            return RunOutcome(returncode=1, stderr=self.stderr)
        output.write_bytes(b"data")
        return RunOutcome(returncode=0)

    def stage_count(self, marker: str) -> int:
        return sum(1 for c in self.commands if marker in " ".join(c))


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def tools_installed():
    with patch("blazecut.ffutil.shutil.which", return_value="/usr/bin/ffmpeg"):
        yield
