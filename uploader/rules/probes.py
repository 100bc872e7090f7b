"""Read-only inspection of uploaded temporary files."""

from pathlib import Path

from uploader.logging.logger import Log

try:
    import magic

    HAS_MAGIC = True
except ImportError:
    HAS_MAGIC = False

try:
    from PIL import Image, UnidentifiedImageError

    HAS_PIL = True
except ImportError:
    HAS_PIL = False


def sniff_mime_type(path: Path) -> str | None:
    """Detect the MIME type from file content, or None if it cannot be detected."""
    if not HAS_MAGIC:
        return None
    try:
        return magic.from_file(str(path), mime=True)
    except (OSError, magic.MagicException) as exc:
        Log.debug(f"MIME detection failed for {path}: {exc}")
        return None


def probe_image_size(path: Path) -> tuple[int, int] | None:
    """Return (width, height) of a raster image, or None if it is not one.

    Only the image header is read; the file is left in place.
    """
    try:
        with Image.open(path) as image:
            return image.size
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        Log.debug(f"Image probe failed for {path}: {exc}")
        return None
