import re
import uuid

DANGEROUS_SUBSTRINGS = (
    "../", "<!--", "-->", "<", ">", "'", '"', "&", "$", "#",
    "{", "}", "[", "]", "=", ";", "?", "%20", "%22",
    "%3c", "%253c", "%3e", "%0e", "%28", "%29", "%2528",
    "%26", "%24", "%3f", "%3b", "%3d",
)

_DISALLOWED_CHARS = re.compile(r"[^\w\-.]", re.ASCII)
_UNDERSCORE_RUNS = re.compile(r"_+")


def sanitize_filename(name: str) -> str:
    """Make a filename base safe to use inside the upload directory.

    Known dangerous sequences are removed, every character outside
    ``[A-Za-z0-9_.-]`` becomes ``_`` and runs of ``_`` are collapsed.
    """
    for token in DANGEROUS_SUBSTRINGS:
        name = name.replace(token, "")
    name = _DISALLOWED_CHARS.sub("_", name)
    return _UNDERSCORE_RUNS.sub("_", name)


def generate_unique_name() -> str:
    return uuid.uuid4().hex
