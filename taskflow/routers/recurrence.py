from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..dependencies import get_pattern_service, get_rule_service
from ..schemas.recurrence import (
    RecurrenceRule,
    RecurrenceRuleUpdate,
    RecurrenceSpec,
    RecurrenceValidation,
    RecurringTaskPattern,
    RecurringTaskPatternUpdate,
)
from ..services.recurrence import check_recurrence
from ..services.recurrence_service import PatternService, RuleService

router = APIRouter(prefix="/recurrence", tags=["recurrence"])


@router.get("/patterns", response_model=list[RecurringTaskPattern])
async def list_patterns(patterns: PatternService = Depends(get_pattern_service)):
    return await patterns.get_all()


@router.get("/patterns/{pattern_id}", response_model=RecurringTaskPattern)
async def get_pattern(pattern_id: int, patterns: PatternService = Depends(get_pattern_service)):
    pattern = await patterns.get_by_id(pattern_id)
    if pattern is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pattern not found")
    return pattern


@router.patch("/patterns/{pattern_id}", response_model=RecurringTaskPattern)
async def update_pattern(
    pattern_id: int,
    payload: RecurringTaskPatternUpdate,
    patterns: PatternService = Depends(get_pattern_service),
):
    pattern = await patterns.update(pattern_id, payload)
    if pattern is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pattern not found")
    return pattern


@router.delete("/patterns/{pattern_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pattern(pattern_id: int, patterns: PatternService = Depends(get_pattern_service)):
    if not await patterns.delete(pattern_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pattern not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/rules", response_model=list[RecurrenceRule])
async def list_rules(task_id: int | None = None, rules: RuleService = Depends(get_rule_service)):
    if task_id is not None:
        return await rules.get_by_task(task_id)
    return await rules.get_all()


@router.get("/rules/{rule_id}", response_model=RecurrenceRule)
async def get_rule(rule_id: int, rules: RuleService = Depends(get_rule_service)):
    rule = await rules.get_by_id(rule_id)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Rule not found")
    return rule


@router.patch("/rules/{rule_id}", response_model=RecurrenceRule)
async def update_rule(rule_id: int, payload: RecurrenceRuleUpdate, rules: RuleService = Depends(get_rule_service)):
    rule = await rules.update(rule_id, payload)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Rule not found")
    return rule


@router.delete("/rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rule(rule_id: int, rules: RuleService = Depends(get_rule_service)):
    if not await rules.delete(rule_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Rule not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/validate", response_model=RecurrenceValidation)
def validate(spec: RecurrenceSpec):
    return check_recurrence(spec)
