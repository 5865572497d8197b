import os
import pytest
from pathlib import Path
from unittest.mock import MagicMock, patch
from webopt.config.models import AppConfig, GeneralConfig

class FakeFFmpeg:
    """Stands in for subprocess.Popen: records commands and writes the output file."""

    def __init__(self):
        self.calls = []
        self.fail_when = None
        self.create_outputs = True
        self.output_lines = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        process = MagicMock()
        process.stdout = list(self.output_lines)
        code = 1 if self.fail_when and self.fail_when(cmd) else 0
        if code == 0 and self.create_outputs and cmd[-1] != os.devnull:
            Path(cmd[-1]).write_bytes(b"\0" * 2048)
        process.returncode = code
        process.wait.return_value = code
        return process

    def commands_for(self, suffix: str):
        return [c for c in self.calls if c[-1].endswith(suffix)]

@pytest.fixture
def fake_ffmpeg():
    fake = FakeFFmpeg()
    with patch("subprocess.Popen", side_effect=fake):
        yield fake

@pytest.fixture
def videos_dir(tmp_path):
    d = tmp_path / "videos"
    d.mkdir()
    return d

@pytest.fixture
def app_config(tmp_path, videos_dir):
    return AppConfig(general=GeneralConfig(
        input_dir=videos_dir,
        output_dir=tmp_path / "optimized",
    ))

@pytest.fixture
def make_video(videos_dir):
    def _make(name: str, size: int = 4096) -> Path:
        path = videos_dir / name
        path.write_bytes(b"\0" * size)
        return path
    return _make
