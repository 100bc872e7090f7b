from uploader.rules.engine import RuleEngine
from uploader.rules.exceptions import InvalidRuleKindError, RuleError
from uploader.rules.formatting import format_bytes
from uploader.rules.models import Rule, RuleKind, ValidationOutcome

__all__ = [
    "InvalidRuleKindError",
    "Rule",
    "RuleEngine",
    "RuleError",
    "RuleKind",
    "ValidationOutcome",
    "format_bytes",
]
