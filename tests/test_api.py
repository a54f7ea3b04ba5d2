"""
Tests for the rewrite rule management API.

The app is built around an in-memory store so each test starts from the
shared mixed rule set.
"""
import json

import pytest
from fastapi.testclient import TestClient

from api import create_app
from rewrite.config import RewriteSettings
from rewrite.store import RuleStore
from rewrite.version import __version__

PREFIX = "/api/rewrite"

@pytest.fixture
def client(store) -> TestClient:
    app = create_app(settings=RewriteSettings(), store=store)
    return TestClient(app)

# Test listing
def test_list_rules(client, rules):
    response = client.get(f"{PREFIX}/rules")
    assert response.status_code == 200
    data = response.json()
    assert [rule["id"] for rule in data] == [rule.id for rule in rules]
    assert data[0]["matchPattern"] == "John"
    assert data[0]["replaceWith"] == "Jane"
    assert data[0]["locator"] == "//Customer/Name"
    assert data[0]["target"] == "response"
    assert data[0]["isRegex"] is False

# Test create
def test_create_rule(client, store):
    response = client.post(f"{PREFIX}/rules", json={
        "id": "new-rule",
        "name": "Mask card",
        "matchPattern": "\\d{12}(\\d{4})",
        "replaceWith": "************$1",
        "isRegex": True,
        "target": "Request"
    })
    assert response.status_code == 201
    assert response.json()["target"] == "request"
    assert store.get("new-rule").is_regex is True
    assert len(store) == 4

def test_create_rule_generates_id(client, store):
    response = client.post(f"{PREFIX}/rules", json={"matchPattern": "a", "replaceWith": "b"})
    assert response.status_code == 201
    rule_id = response.json()["id"]
    assert rule_id
    assert store.get(rule_id) is not None

def test_create_duplicate_rule(client, rules):
    response = client.post(f"{PREFIX}/rules", json={"id": rules[0].id, "matchPattern": "x"})
    assert response.status_code == 409

def test_create_rule_requires_pattern(client):
    response = client.post(f"{PREFIX}/rules", json={"replaceWith": "x"})
    assert response.status_code == 422

# Test update
def test_update_rule(client, store, rules):
    response = client.put(f"{PREFIX}/rules/{rules[1].id}", json={
        "matchPattern": "example.com",
        "replaceWith": "example.net",
        "enabled": False
    })
    assert response.status_code == 200
    assert response.json()["id"] == rules[1].id

    updated = store.get(rules[1].id)
    assert updated.replace_with == "example.net"
    assert updated.enabled is False
    assert [rule.id for rule in store.list()] == [rule.id for rule in rules]

def test_update_unknown_rule(client):
    response = client.put(f"{PREFIX}/rules/missing", json={"matchPattern": "x"})
    assert response.status_code == 404

# Test delete
def test_delete_rule(client, store, rules):
    response = client.delete(f"{PREFIX}/rules/{rules[0].id}")
    assert response.status_code == 200
    assert response.json() == {"message": "Rule deleted"}
    assert store.get(rules[0].id) is None

    response = client.delete(f"{PREFIX}/rules/{rules[0].id}")
    assert response.status_code == 404

# Test reorder
def test_reorder_rules(client, store, rules):
    new_order = [rules[2].id, rules[1].id, rules[0].id]
    response = client.put(f"{PREFIX}/rules/reorder", json={"ruleIds": new_order})
    assert response.status_code == 200
    assert [rule.id for rule in store.list()] == new_order

def test_reorder_rules_mismatch(client, store, rules):
    response = client.put(f"{PREFIX}/rules/reorder", json={"ruleIds": [rules[0].id]})
    assert response.status_code == 400
    assert [rule.id for rule in store.list()] == [rule.id for rule in rules]

# Test preview
def test_preview_with_stored_rules(client, soap_response):
    response = client.post(f"{PREFIX}/preview", json={"body": soap_response, "direction": "response"})
    assert response.status_code == 200
    data = response.json()
    assert data["changed"] is True
    assert "<m:Name>Jane</m:Name>" in data["body"]
    assert "john@example.org" in data["body"]
    assert [outcome["changed"] for outcome in data["outcomes"]] == [True, True]

def test_preview_with_inline_rules(client):
    response = client.post(f"{PREFIX}/preview", json={
        "body": "<Total>10</Total>",
        "direction": "request",
        "rules": [
            {"id": "bad", "matchPattern": "(", "isRegex": True},
            {"id": "double", "locator": "//Total", "matchPattern": "10", "replaceWith": "20"}
        ]
    })
    assert response.status_code == 200
    data = response.json()
    assert data["body"] == "<Total>20</Total>"
    assert data["outcomes"][0]["ruleId"] == "bad"
    assert data["outcomes"][0]["error"]
    assert data["outcomes"][1] == {"ruleId": "double", "changed": True, "error": None}

def test_preview_rejects_unknown_direction(client):
    response = client.post(f"{PREFIX}/preview", json={"body": "x", "direction": "sideways"})
    assert response.status_code == 422

# Test health
def test_health(client):
    response = client.get(f"{PREFIX}/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__, "rules": 3}

# Test file-backed app
def test_app_loads_rules_file(tmp_path):
    rules_file = tmp_path / "settings.json"
    rules_file.write_text(json.dumps({"replaceRules": [{"id": "r1", "matchPattern": "a"}]}))

    app = create_app(settings=RewriteSettings(rules_file=str(rules_file)))
    client = TestClient(app)
    assert client.get(f"{PREFIX}/health").json()["rules"] == 1

    client.delete(f"{PREFIX}/rules/r1")
    assert json.loads(rules_file.read_text())["replaceRules"] == []
    assert isinstance(app.state.rule_store, RuleStore)

def test_version(client):
    response = client.get(f"{PREFIX}/version")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == __version__
    assert "pydantic" in data["dependencies"]
