"""API models for rewrite rule management."""

__all__ = [
    "PreviewRequest",
    "RuleOutcomeModel",
    "PreviewResponse",
    "ReorderRequest",
]
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rewrite.models import Direction, Rule

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class PreviewRequest(_CamelModel):
    """Body to run through the pipeline.

    When ``rules`` is omitted the stored rules are used.
    """
    body: str
    direction: Direction = Direction.REQUEST
    rules: Optional[List[Rule]] = None

class RuleOutcomeModel(_CamelModel):
    """Outcome of one rule during a preview run."""
    rule_id: str
    changed: bool
    error: Optional[str] = None

class PreviewResponse(_CamelModel):
    """Rewritten body and per-rule outcomes."""
    body: str
    changed: bool
    outcomes: List[RuleOutcomeModel] = Field(default_factory=list)

class ReorderRequest(_CamelModel):
    """New rule order, naming every stored rule exactly once."""
    rule_ids: List[str]
