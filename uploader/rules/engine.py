from collections.abc import Callable
from typing import ClassVar

from uploader.logging.logger import Log
from uploader.rules.exceptions import InvalidRuleKindError
from uploader.rules.formatting import format_bytes
from uploader.rules.models import Rule, RuleKind, ValidationOutcome, Validator
from uploader.rules.validators import (
    ExtensionValidator,
    FileSizeValidator,
    ImageDimensionsValidator,
    MimeTypeValidator,
)
from uploader.upload.models import FileDescriptor


def _as_list(params: tuple[object, ...]) -> list[str]:
    if len(params) == 1 and isinstance(params[0], (list, tuple, set, frozenset)):
        return [str(p) for p in params[0]]
    return [str(p) for p in params]


def _mime_rule(*params: object) -> Rule:
    patterns = _as_list(params)
    return Rule(
        name="mime_type",
        validator=MimeTypeValidator(patterns),
        message=f"Invalid file type. Allowed: {', '.join(patterns)}",
    )


def _extension_rule(*params: object) -> Rule:
    extensions = _as_list(params)
    return Rule(
        name="extension",
        validator=ExtensionValidator(extensions),
        message=f"Invalid file extension. Allowed: {', '.join(extensions)}",
    )


def _size_rule(max_bytes: int) -> Rule:
    return Rule(
        name="file_size",
        validator=FileSizeValidator(int(max_bytes)),
        message=f"File is too large. Maximum size: {format_bytes(int(max_bytes))}",
    )


def _image_size_rule(min_width: int, min_height: int, max_width: int, max_height: int) -> Rule:
    return Rule(
        name="image_size",
        validator=ImageDimensionsValidator(
            int(min_width), int(min_height), int(max_width), int(max_height)
        ),
        message=(
            f"Image must be at least {min_width}x{min_height} "
            f"and at most {max_width}x{max_height} pixels"
        ),
    )


class RuleEngine:
    """Ordered set of named validation rules.

    Rules run in registration order and evaluation stops at the first failure.
    Registering a rule under an existing name replaces it in place.
    """

    BUILDERS: ClassVar[dict[RuleKind, Callable[..., Rule]]] = {
        RuleKind.MIME: _mime_rule,
        RuleKind.EXTENSION: _extension_rule,
        RuleKind.SIZE: _size_rule,
        RuleKind.RESIZE_MAXMIN: _image_size_rule,
    }

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules.values())

    def add_rule(self, kind: RuleKind | str, *params: object) -> "RuleEngine":
        """Register a built-in rule.

        Raises:
            InvalidRuleKindError: if the kind is unknown or the parameters do not
                fit it.
        """
        try:
            rule_kind = RuleKind(kind)
        except ValueError:
            raise InvalidRuleKindError(
                f"Unknown rule kind '{kind}'. Choose from: {[k.value for k in RuleKind]}"
            ) from None
        builder = self.BUILDERS[rule_kind]
        try:
            rule = builder(*params)
        except (TypeError, ValueError) as exc:
            raise InvalidRuleKindError(
                f"Invalid parameters for rule kind '{rule_kind.value}': {exc}"
            ) from exc
        return self._register(rule)

    def add_custom_rule(self, name: str, validator: Validator, message: str) -> "RuleEngine":
        return self._register(Rule(name=name, validator=validator, message=message))

    def validate(self, descriptor: FileDescriptor) -> ValidationOutcome:
        for rule in self._rules.values():
            if not rule.validator(descriptor):
                Log.debug(f"Rule '{rule.name}' rejected {descriptor.original_name}")
                return ValidationOutcome(passed=False, message=rule.message)
        return ValidationOutcome(passed=True)

    def _register(self, rule: Rule) -> "RuleEngine":
        self._rules[rule.name] = rule
        Log.debug(f"Registered rule '{rule.name}'")
        return self
