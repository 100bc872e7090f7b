from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path, PurePosixPath


class TransportStatus(IntEnum):
    """Per-file status codes reported by the request layer."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


def split_filename(name: str) -> tuple[str, str]:
    """Split a client filename into (stem, lowercase extension).

    Directory components are discarded first; the extension is the text after
    the last dot of the base name, so ``.htaccess`` has an empty stem.
    """
    base = PurePosixPath(name.replace("\\", "/")).name
    if "." not in base:
        return base, ""
    stem, _, extension = base.rpartition(".")
    return stem, extension.lower()


@dataclass(frozen=True)
class FileDescriptor:
    """A single uploaded file as handed over by the request layer."""

    original_name: str
    temp_path: Path
    declared_size: int
    declared_mime: str
    transport_error: int = TransportStatus.OK
    stem: str = field(init=False)
    extension: str = field(init=False)

    def __post_init__(self) -> None:
        stem, extension = split_filename(self.original_name)
        object.__setattr__(self, "temp_path", Path(self.temp_path))
        object.__setattr__(self, "stem", stem)
        object.__setattr__(self, "extension", extension)


@dataclass(frozen=True)
class UploadOutcome:
    """Result of processing one element of an upload."""

    index: int
    original_name: str
    stored_name: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.stored_name is not None
