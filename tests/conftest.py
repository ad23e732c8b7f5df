from pathlib import Path
from typing import List, Tuple

import pytest


class FakeTools:
    """Stands in for ImageTools: records calls and writes small files."""

    def __init__(self, size: Tuple[int, int] = (2200, 1400)) -> None:
        self.size = size
        self.compressed: List[int] = []
        self.previewed: List[Path] = []
        self.resized: List[Tuple[Path, int, Path]] = []

    def compress(self, data: bytes, quality: int) -> bytes:
        self.compressed.append(quality)
        return b"JPEG q=%d " % quality + data

    def measure(self, path: Path) -> Tuple[int, int]:
        return self.size

    def resize(self, src: Path, width: int, dst: Path) -> Path:
        self.resized.append((src, width, dst))
        dst.write_bytes(b"resized %d" % width)
        return dst

    def preview(self, path: Path) -> None:
        self.previewed.append(path)


class ScriptedConfirm:
    """Answers the quality prompt from a fixed list of yes/no replies."""

    def __init__(self, answers: List[bool]) -> None:
        self.answers = list(answers)
        self.asked: List[int] = []

    def __call__(self, path: Path, quality: int) -> bool:
        self.asked.append(quality)
        return self.answers.pop(0)


@pytest.fixture
def fake_tools():
    return FakeTools()


@pytest.fixture
def source(tmp_path):
    p = tmp_path / "city.jpg"
    p.write_bytes(b"raw photo bytes")
    return p
