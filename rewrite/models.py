"""Rule model shared by the rewrite store, pipeline and API."""

__all__ = [
    "RuleScope",
    "RuleTarget",
    "Direction",
    "Rule",
]
import uuid
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

class RuleScope(str, Enum):
    """Part of the traffic a rule may touch."""
    BODY = "body"
    URL = "url"

class RuleTarget(str, Enum):
    """Traffic direction(s) a rule applies to."""
    REQUEST = "request"
    RESPONSE = "response"
    BOTH = "both"

class Direction(str, Enum):
    """Direction of the body handed to the pipeline."""
    REQUEST = "request"
    RESPONSE = "response"

    @classmethod
    def coerce(cls, value: Union['Direction', str]) -> 'Direction':
        """Accept a Direction or its name/value in any case."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())

    def matches(self, target: RuleTarget) -> bool:
        return target is RuleTarget.BOTH or target.value == self.value

class Rule(BaseModel):
    """One rewrite instruction.

    Rules are frozen: the pipeline only ever reads them, and edits go through
    the store as full replacements. Serialized keys are camelCase; parsing
    also accepts snake_case and the legacy ``xpath``/``matchText`` keys of
    element-scoped rules.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: Optional[str] = None
    enabled: bool = True
    scope: RuleScope = Field(
        default=RuleScope.BODY,
        validation_alias=AliasChoices("scope", "matchType", "match_type"),
        serialization_alias="scope",
    )
    target: RuleTarget = RuleTarget.BOTH
    locator: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("locator", "xpath"),
        serialization_alias="locator",
    )
    match_pattern: str = Field(
        validation_alias=AliasChoices("matchPattern", "match_pattern", "matchText", "match_text"),
        serialization_alias="matchPattern",
    )
    replace_with: str = Field(
        default="",
        validation_alias=AliasChoices("replaceWith", "replace_with"),
        serialization_alias="replaceWith",
    )
    is_regex: bool = Field(
        default=False,
        validation_alias=AliasChoices("isRegex", "is_regex"),
        serialization_alias="isRegex",
    )

    @field_validator("scope", "target", mode="before")
    @classmethod
    def _lowercase_enum(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("replace_with", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def label(self) -> str:
        """Name used in log lines."""
        return self.name or self.id

    @property
    def has_locator(self) -> bool:
        return bool(self.locator and self.locator.strip())

    def applies_to(self, direction: Union[Direction, str]) -> bool:
        """Whether a body pass in ``direction`` should run this rule."""
        return (
            self.enabled
            and self.scope is RuleScope.BODY
            and Direction.coerce(direction).matches(self.target)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the rule to its persisted (camelCase) form."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Rule':
        """Create a rule from its persisted form."""
        return cls.model_validate(data)
