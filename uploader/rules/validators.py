"""Built-in file validators resolved by RuleEngine at registration time."""

from fnmatch import fnmatchcase

from uploader.rules import probes
from uploader.upload.models import FileDescriptor


class MimeTypeValidator:
    """Accepts a file when its sniffed or declared MIME type matches a glob pattern."""

    def __init__(self, patterns: list[str]) -> None:
        self.patterns = list(patterns)

    def __call__(self, descriptor: FileDescriptor) -> bool:
        detected = probes.sniff_mime_type(descriptor.temp_path)
        candidates = [descriptor.declared_mime]
        if detected:
            candidates.insert(0, detected)
        return any(
            fnmatchcase(mime, pattern) for pattern in self.patterns for mime in candidates
        )


class ExtensionValidator:
    def __init__(self, extensions: list[str]) -> None:
        self.extensions = frozenset(ext.lower() for ext in extensions)

    def __call__(self, descriptor: FileDescriptor) -> bool:
        return descriptor.extension in self.extensions


class FileSizeValidator:
    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes

    def __call__(self, descriptor: FileDescriptor) -> bool:
        return descriptor.declared_size <= self.max_bytes


class ImageDimensionsValidator:
    """Checks pixel dimensions against optional bounds; a bound of 0 is ignored.

    When Pillow is unavailable every file passes. Files that cannot be read as
    an image fail.
    """

    def __init__(self, min_width: int, min_height: int, max_width: int, max_height: int) -> None:
        self.min_width = min_width
        self.min_height = min_height
        self.max_width = max_width
        self.max_height = max_height

    def __call__(self, descriptor: FileDescriptor) -> bool:
        if not probes.HAS_PIL:
            return True
        size = probes.probe_image_size(descriptor.temp_path)
        if size is None:
            return False
        width, height = size
        return not (
            (self.min_width and width < self.min_width)
            or (self.min_height and height < self.min_height)
            or (self.max_width and width > self.max_width)
            or (self.max_height and height > self.max_height)
        )
