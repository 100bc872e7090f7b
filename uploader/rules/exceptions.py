class RuleError(Exception):
    """Base exception for rule configuration errors."""


class InvalidRuleKindError(RuleError):
    """Raised when a rule kind is unknown or given the wrong parameters."""
