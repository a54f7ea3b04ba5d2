"""
Rewrite pipeline.

The pipeline filters a rule list down to the enabled body rules for one
direction and folds them over the body in list order. Each rule sees the
previous rule's output. A rule that fails contributes nothing: its error is
recorded in that rule's outcome and logged, and the fold carries on with the
body as it was before the rule ran.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .errors import RewriteError, UnresolvableLocatorError, get_error_for_exception
from .locator import require_element_name
from .models import Direction, Rule
from .substitution import compile_substitution, global_substitute, scoped_substitute

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Rule, RewriteError], None]

@dataclass(frozen=True)
class RuleOutcome:
    """Result of running one rule."""
    rule_id: str
    changed: bool = False
    error: Optional[RewriteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "changed": self.changed,
            "error": str(self.error) if self.error else None
        }

@dataclass(frozen=True)
class RewriteResult:
    """Final body of a pipeline run plus one outcome per rule that ran."""
    body: str
    outcomes: Tuple[RuleOutcome, ...] = field(default_factory=tuple)

    @property
    def changed(self) -> bool:
        return any(outcome.changed for outcome in self.outcomes)

    @property
    def changed_rule_ids(self) -> List[str]:
        return [outcome.rule_id for outcome in self.outcomes if outcome.changed]

    @property
    def failed(self) -> List[RuleOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

def select_rules(rules: Iterable[Rule], direction: Union[Direction, str]) -> Tuple[Rule, ...]:
    """Enabled body rules that apply to ``direction``, in their original order."""
    direction = Direction.coerce(direction)
    return tuple(rule for rule in rules if rule.applies_to(direction))

def apply_rule(rule: Rule, body: str) -> str:
    """Apply a single rule to ``body``.

    The rule is scoped to its locator's element when the locator resolves,
    otherwise it is applied to the whole body.

    Raises:
        InvalidPatternError: If the rule's regex or replacement template is invalid
    """
    substitution = compile_substitution(rule.match_pattern, rule.replace_with, rule.is_regex)

    if rule.has_locator:
        try:
            element_name = require_element_name(rule.locator)
        except UnresolvableLocatorError as e:
            logger.warning(f"{e.with_rule(rule.id)}; falling back to global substitution")
        else:
            return scoped_substitute(body, element_name, substitution)

    return global_substitute(body, substitution)

class RewritePipeline:
    """Applies ordered rewrite rules to request and response bodies."""

    def __init__(self, on_error: Optional[ErrorCallback] = None):
        """Initialize the pipeline.

        Args:
            on_error: Called with ``(rule, error)`` for every rule that fails
        """
        self._on_error = on_error

    def run(self, body: str, rules: Iterable[Rule], direction: Union[Direction, str]) -> RewriteResult:
        """Fold the applicable rules over ``body`` and report per-rule outcomes."""
        direction = Direction.coerce(direction)
        # Snapshot so changes to the caller's collection are not seen mid-run
        selected = select_rules(tuple(rules or ()), direction)
        if not body or not selected:
            return RewriteResult(body=body)

        outcomes = []
        for rule in selected:
            try:
                rewritten = apply_rule(rule, body)
            except Exception as e:
                error = get_error_for_exception(e).with_rule(rule.id)
                logger.error(f"Rewrite rule {rule.label} failed, leaving body unchanged: {error}")
                self._notify(rule, error)
                outcomes.append(RuleOutcome(rule_id=rule.id, error=error))
                continue

            changed = rewritten != body
            if changed:
                logger.debug(f"Rewrite rule {rule.label} modified the {direction.value} body")
            outcomes.append(RuleOutcome(rule_id=rule.id, changed=changed))
            body = rewritten

        return RewriteResult(body=body, outcomes=tuple(outcomes))

    def apply_to_request(self, body: str, rules: Iterable[Rule]) -> str:
        return self.run(body, rules, Direction.REQUEST).body

    def apply_to_response(self, body: str, rules: Iterable[Rule]) -> str:
        return self.run(body, rules, Direction.RESPONSE).body

    def apply_scoped(self, body: str, rules: Iterable[Rule], direction: Union[Direction, str]) -> str:
        """Entry point for element-scoped rules.

        Runs the same engine as the request/response passes, so rules
        without a locator still take the global fallback.
        """
        return self.run(body, rules, direction).body

    def _notify(self, rule: Rule, error: RewriteError) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(rule, error)
        except Exception as e:
            logger.error(f"Error callback failed for rule {rule.label}: {e}")

_default_pipeline = RewritePipeline()

def apply_to_request(body: str, rules: Iterable[Rule]) -> str:
    """Rewrite a request body with the default pipeline."""
    return _default_pipeline.apply_to_request(body, rules)

def apply_to_response(body: str, rules: Iterable[Rule]) -> str:
    """Rewrite a response body with the default pipeline."""
    return _default_pipeline.apply_to_response(body, rules)

def apply_scoped(body: str, rules: Iterable[Rule], direction: Union[Direction, str]) -> str:
    """Rewrite a body with element-scoped rules using the default pipeline."""
    return _default_pipeline.apply_scoped(body, rules, direction)
