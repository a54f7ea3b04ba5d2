"""FastAPI endpoints for rewrite rule management."""

import logging
from typing import List

from fastapi import Depends, HTTPException, Request, status

from rewrite.models import Rule
from rewrite.pipeline import RewritePipeline
from rewrite.store import RuleStore
from rewrite.version import __version__, get_version_info

from . import router
from . import models

logger = logging.getLogger(__name__)

__all__ = [
    "list_rules",
    "create_rule",
    "reorder_rules",
    "update_rule",
    "delete_rule",
    "preview",
    "health_check",
    "version_info"
]

def get_store(request: Request) -> RuleStore:
    """Rule store attached to the running application."""
    return request.app.state.rule_store

@router.get("/rules", response_model=List[Rule])
async def list_rules(store: RuleStore = Depends(get_store)) -> List[Rule]:
    """List rewrite rules in evaluation order."""
    return list(store.list())

@router.post("/rules", response_model=Rule, status_code=status.HTTP_201_CREATED)
async def create_rule(rule: Rule, store: RuleStore = Depends(get_store)) -> Rule:
    """Append a new rewrite rule."""
    if not store.add(rule):
        raise HTTPException(status_code=409, detail=f"Rule {rule.id} already exists")
    return rule

# Declared before /rules/{rule_id} so "reorder" is not taken for an id
@router.put("/rules/reorder")
async def reorder_rules(
    reorder: models.ReorderRequest,
    store: RuleStore = Depends(get_store)
) -> dict:
    """Reorder rules by listing every rule id in the new order."""
    if not store.reorder(reorder.rule_ids):
        raise HTTPException(status_code=400, detail="Rule ids do not match stored rules")
    return {"message": "Rules reordered successfully"}

@router.put("/rules/{rule_id}", response_model=Rule)
async def update_rule(rule_id: str, rule: Rule, store: RuleStore = Depends(get_store)) -> Rule:
    """Replace an existing rewrite rule."""
    rule = rule.model_copy(update={"id": rule_id})
    if not store.update(rule):
        raise HTTPException(status_code=404, detail="Rule not found")
    return rule

@router.delete("/rules/{rule_id}")
async def delete_rule(rule_id: str, store: RuleStore = Depends(get_store)) -> dict:
    """Delete a rewrite rule."""
    if not store.remove(rule_id):
        raise HTTPException(status_code=404, detail="Rule not found")
    return {"message": "Rule deleted"}

@router.post("/preview", response_model=models.PreviewResponse)
async def preview(
    preview_request: models.PreviewRequest,
    store: RuleStore = Depends(get_store)
) -> models.PreviewResponse:
    """Run a body through the pipeline without touching any traffic."""
    rules = preview_request.rules if preview_request.rules is not None else store.list()
    result = RewritePipeline().run(preview_request.body, rules, preview_request.direction)
    return models.PreviewResponse(
        body=result.body,
        changed=result.changed,
        outcomes=[models.RuleOutcomeModel(**outcome.to_dict()) for outcome in result.outcomes]
    )

@router.get("/health")
async def health_check(store: RuleStore = Depends(get_store)) -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "rules": len(store)
    }

@router.get("/version")
async def version_info() -> dict:
    """Version of the engine and its dependency requirements."""
    return get_version_info()
