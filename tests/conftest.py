import io
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def incoming_dir(tmp_path: Path) -> Path:
    """Stand-in for the request layer's temporary upload directory."""
    path = tmp_path / "incoming"
    path.mkdir()
    return path


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def make_temp_file(incoming_dir: Path) -> Callable[[str, bytes], Path]:
    """Write bytes to a temporary upload file and return its path."""

    def _make(name: str, content: bytes = b"hello") -> Path:
        path = incoming_dir / name
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture()
def png_bytes() -> Callable[[int, int], bytes]:
    """Generate a solid-colour PNG of the requested size."""

    def _make(width: int, height: int) -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", (width, height), color=(200, 30, 30)).save(buf, format="PNG")
        return buf.getvalue()

    return _make


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()
