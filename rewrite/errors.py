"""Error types raised while compiling or applying rewrite rules."""
from enum import Enum
from typing import Optional

class ErrorCode(Enum):
    """Error codes for rewrite errors."""
    UNKNOWN = 1
    INVALID_PATTERN = 2
    UNRESOLVABLE_LOCATOR = 3

class RewriteError(Exception):
    """Base class for rewrite errors."""

    def __init__(self, message: str, code: int = ErrorCode.UNKNOWN.value, rule_id: Optional[str] = None):
        self.message = message
        self.code = code
        self.rule_id = rule_id
        super().__init__(message)

    def __str__(self) -> str:
        if self.rule_id:
            return f"{self.message} (code: {self.code}, rule: {self.rule_id})"
        return f"{self.message} (code: {self.code})"

    def with_rule(self, rule_id: str) -> 'RewriteError':
        """Attach the offending rule id and return self."""
        self.rule_id = rule_id
        return self

class InvalidPatternError(RewriteError):
    """Regex pattern or replacement template could not be compiled or expanded."""
    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid pattern {pattern!r}: {reason}", ErrorCode.INVALID_PATTERN.value)

class UnresolvableLocatorError(RewriteError):
    """Locator path does not resolve to an element name."""
    def __init__(self, locator: str):
        self.locator = locator
        super().__init__(f"Locator {locator!r} does not resolve to an element name",
                         ErrorCode.UNRESOLVABLE_LOCATOR.value)

def get_error_for_exception(exc: Exception) -> RewriteError:
    """Convert arbitrary exceptions raised by a rule into rewrite errors."""
    if isinstance(exc, RewriteError):
        return exc
    error = RewriteError(f"{type(exc).__name__}: {exc}")
    error.__cause__ = exc
    return error
