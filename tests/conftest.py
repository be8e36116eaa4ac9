import sys
import wave
from pathlib import Path

import pytest

# Add the src directory to sys.path so that genre_organizer can be imported
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))


class FakeDecoder:
    """Stands in for mutagen: tag data is looked up by file name."""

    def __init__(self, tags_by_name: dict):
        self.tags_by_name = tags_by_name
        self.calls = []

    def __call__(self, path: Path) -> dict:
        self.calls.append(path)
        value = self.tags_by_name.get(path.name, {"genre": []})
        if isinstance(value, BaseException):
            raise value
        return value


@pytest.fixture
def fake_decoder():
    return FakeDecoder


def write_silent_wav(path: Path, seconds: int = 1, rate: int = 8000) -> Path:
    """Write a valid, untagged mono WAV file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(rate)
        w.writeframes(b"\x00\x00" * rate * seconds)
    return path
