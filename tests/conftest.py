from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

ImageFactory = Callable[..., Path]


@pytest.fixture()
def make_image() -> ImageFactory:
    """Return a helper that writes a real image whose format follows the file suffix."""

    def _make(directory: Path, name: str, size: tuple[int, int] = (120, 160)) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        Image.new("RGB", size, color=(200, 200, 200)).save(path)
        return path

    return _make


@pytest.fixture()
def make_damaged_image() -> ImageFactory:
    """Return a helper that writes a file with an image suffix but unreadable content."""

    def _make(directory: Path, name: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_bytes(b"this is not an image")
        return path

    return _make
