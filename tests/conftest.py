"""Common test fixtures and utilities."""
from typing import Any, Callable, List

import pytest

from rewrite.models import Rule
from rewrite.store import RuleStore

SOAP_RESPONSE = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/" xmlns:m="urn:crm">'
    '<soap:Body>'
    '<m:GetCustomerResponse>'
    '<m:Customer id="42">'
    '<m:Name>John</m:Name>'
    '<m:Email type="John">john@example.com</m:Email>'
    '</m:Customer>'
    '<m:Customer id="43">'
    '<m:Name lang="en">John Smith</m:Name>'
    '</m:Customer>'
    '</m:GetCustomerResponse>'
    '</soap:Body>'
    '</soap:Envelope>'
)

@pytest.fixture
def soap_response() -> str:
    """SOAP response with two customers in a prefixed namespace."""
    return SOAP_RESPONSE

@pytest.fixture
def make_rule() -> Callable[..., Rule]:
    """Factory for rules with sensible defaults."""
    counter = {"n": 0}

    def _make(match_pattern: str, replace_with: str = "", **kwargs: Any) -> Rule:
        counter["n"] += 1
        kwargs.setdefault("id", f"rule-{counter['n']}")
        return Rule(match_pattern=match_pattern, replace_with=replace_with, **kwargs)

    return _make

@pytest.fixture
def rules(make_rule) -> List[Rule]:
    """A small mixed rule set."""
    return [
        make_rule("John", "Jane", name="Rename customer", locator="//Customer/Name", target="response"),
        make_rule("example.com", "example.org", name="Swap domain"),
        make_rule("secret", "***", name="Request only", target="request"),
    ]

@pytest.fixture
def store(rules) -> RuleStore:
    """In-memory store holding the mixed rule set."""
    return RuleStore(rules)
