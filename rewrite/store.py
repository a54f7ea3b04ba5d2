"""
Rule storage for the rewrite engine.

RuleStore keeps the ordered rule collection that the UI edits and hands out
immutable snapshots to the pipeline. FileRuleStorage persists that
collection as the ``replaceRules`` array of a JSON or YAML settings document.
"""
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from .models import Rule

logger = logging.getLogger(__name__)

RULES_KEY = "replaceRules"

def _unique_rules(rules: Iterable[Rule], source: str) -> List[Rule]:
    """Drop rules whose id was already seen, keeping the first occurrence."""
    seen = set()
    unique = []
    for rule in rules:
        if rule.id in seen:
            logger.warning(f"Skipping rewrite rule with duplicate id {rule.id} from {source}")
            continue
        seen.add(rule.id)
        unique.append(rule)
    return unique

class FileRuleStorage:
    """Reads and writes rules stored in a settings document."""

    def __init__(self, path: Union[str, Path], key: str = RULES_KEY):
        """Initialize file-based rule storage.

        Args:
            path: Path to a ``.json``, ``.yaml`` or ``.yml`` settings document
            key: Key holding the rule array inside the document
        """
        self.path = Path(path)
        self.key = key

    @property
    def is_yaml(self) -> bool:
        return self.path.suffix.lower() in ('.yaml', '.yml')

    def _read_document(self) -> Any:
        with open(self.path, 'r', encoding='utf-8') as f:
            if self.is_yaml:
                return yaml.safe_load(f)
            return json.load(f)

    def load(self) -> List[Rule]:
        """Load rules from the document.

        A missing file yields no rules. Entries that do not describe a valid
        rule are skipped.
        """
        try:
            document = self._read_document()
        except FileNotFoundError:
            return []
        except (ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading rewrite rules from {self.path}: {e}")
            return []

        if isinstance(document, dict):
            rules_data = document.get(self.key) or []
        else:
            rules_data = document or []
        if not isinstance(rules_data, list):
            logger.error(f"Rewrite rules in {self.path} are not a list")
            return []

        rules = []
        for index, rule_data in enumerate(rules_data):
            try:
                rules.append(Rule.from_dict(rule_data))
            except ValidationError as e:
                logger.warning(f"Skipping invalid rule #{index} in {self.path}: {e.error_count()} error(s)")
        rules = _unique_rules(rules, str(self.path))
        logger.debug(f"Loaded {len(rules)} rewrite rules from {self.path}")
        return rules

    def save(self, rules: Iterable[Rule]) -> bool:
        """Write rules back under ``key``, keeping the rest of the document."""
        try:
            try:
                document = self._read_document()
            except FileNotFoundError:
                document = None
            if not isinstance(document, dict):
                document = {}

            document[self.key] = [rule.to_dict() for rule in rules]

            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                if self.is_yaml:
                    yaml.safe_dump(document, f, default_flow_style=False, sort_keys=False)
                else:
                    json.dump(document, f, indent=2)
            return True
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error saving rewrite rules to {self.path}: {e}")
            return False

class RuleStore:
    """Ordered, thread-safe collection of rewrite rules.

    Reads return tuples so a pipeline run never observes later edits. When a
    storage backend is given, every successful mutation is persisted.
    """

    def __init__(self, rules: Optional[Iterable[Rule]] = None, storage: Optional[FileRuleStorage] = None):
        self._lock = threading.RLock()
        self._rules: List[Rule] = _unique_rules(rules or [], "initial rules")
        self._storage = storage

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'RuleStore':
        """Create a store backed by, and populated from, a settings document."""
        storage = FileRuleStorage(path)
        return cls(storage.load(), storage=storage)

    def _index_of(self, rule_id: str) -> Optional[int]:
        for index, rule in enumerate(self._rules):
            if rule.id == rule_id:
                return index
        return None

    def _persist(self) -> None:
        if self._storage is not None:
            self._storage.save(self._rules)

    def list(self) -> Tuple[Rule, ...]:
        """Snapshot of all rules in order."""
        with self._lock:
            return tuple(self._rules)

    def get(self, rule_id: str) -> Optional[Rule]:
        with self._lock:
            index = self._index_of(rule_id)
            return None if index is None else self._rules[index]

    def add(self, rule: Rule) -> bool:
        """Append a rule. Returns False if a rule with the same id exists."""
        with self._lock:
            if self._index_of(rule.id) is not None:
                logger.warning(f"Rewrite rule {rule.id} already exists")
                return False
            self._rules.append(rule)
            self._persist()
        logger.info(f"Added rewrite rule {rule.label}")
        return True

    def update(self, rule: Rule) -> bool:
        """Replace the rule with the same id in place. Returns False if unknown."""
        with self._lock:
            index = self._index_of(rule.id)
            if index is None:
                logger.warning(f"Cannot update unknown rewrite rule {rule.id}")
                return False
            self._rules[index] = rule
            self._persist()
        logger.info(f"Updated rewrite rule {rule.label}")
        return True

    def remove(self, rule_id: str) -> bool:
        """Delete a rule by id. Returns False if unknown."""
        with self._lock:
            index = self._index_of(rule_id)
            if index is None:
                logger.warning(f"Cannot remove unknown rewrite rule {rule_id}")
                return False
            del self._rules[index]
            self._persist()
        logger.info(f"Removed rewrite rule {rule_id}")
        return True

    def reorder(self, rule_ids: List[str]) -> bool:
        """Reorder rules to match ``rule_ids``, which must name every rule exactly once."""
        with self._lock:
            by_id: Dict[str, Rule] = {rule.id: rule for rule in self._rules}
            if len(rule_ids) != len(by_id) or set(rule_ids) != set(by_id):
                logger.warning("Rewrite rule reorder ids do not match stored rules")
                return False
            self._rules = [by_id[rule_id] for rule_id in rule_ids]
            self._persist()
        return True

    def replace_all(self, rules: Iterable[Rule]) -> None:
        """Replace the whole collection, e.g. after the settings document changed."""
        with self._lock:
            self._rules = _unique_rules(rules, "replacement rules")
            self._persist()

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.list())
