"""Content rewrite engine package.

This package rewrites captured or authored request/response bodies using an
ordered list of user-defined rules, including:
- Global match/replace over the whole body
- Element-scoped replacement inside tags located by a simplified path
- Per-rule failure isolation so a bad rule never breaks traffic
"""

from .models import Rule, RuleScope, RuleTarget, Direction
from .pipeline import (
    RewritePipeline,
    RewriteResult,
    RuleOutcome,
    apply_to_request,
    apply_to_response,
    apply_scoped,
)
from .store import RuleStore, FileRuleStorage
from .version import __version__

__all__ = [
    'Rule',
    'RuleScope',
    'RuleTarget',
    'Direction',
    'RewritePipeline',
    'RewriteResult',
    'RuleOutcome',
    'apply_to_request',
    'apply_to_response',
    'apply_scoped',
    'RuleStore',
    'FileRuleStorage',
    '__version__'
]

# Initialize package-level logger
import logging
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
