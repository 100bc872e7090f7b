from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from uploader.upload.models import FileDescriptor

Validator = Callable[[FileDescriptor], bool]


class RuleKind(str, Enum):
    """Built-in rule kinds accepted by RuleEngine.add_rule."""

    MIME = "mime"
    EXTENSION = "extension"
    SIZE = "size"
    RESIZE_MAXMIN = "resize_maxmin"


@dataclass(frozen=True)
class Rule:
    """A named predicate paired with the message reported when it fails."""

    name: str
    validator: Validator
    message: str


@dataclass(frozen=True)
class ValidationOutcome:
    passed: bool
    message: str | None = None
