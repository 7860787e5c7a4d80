"""
Alert rule API routes.
"""

from fastapi import APIRouter, HTTPException, Request

from ..schemas import AlertRuleCreate, AlertRuleUpdate

router = APIRouter()


@router.get("")
async def list_alert_rules(request: Request) -> list[dict]:
    rules = request.app.state.monitor.rules
    return [r.to_dict() for r in rules.get_rules()]


@router.post("", status_code=201)
async def create_alert_rule(body: AlertRuleCreate, request: Request) -> dict:
    rules = request.app.state.monitor.rules

    try:
        rule = rules.add_rule(body.to_rule())
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return rule.to_dict()


@router.patch("/{rule_id}")
async def update_alert_rule(
    rule_id: str,
    body: AlertRuleUpdate,
    request: Request,
) -> dict:
    """
    Update an alert rule.

    Typically used to enable or disable a rule; conditions are merged
    into the existing ones.
    """
    rules = request.app.state.monitor.rules

    rule = rules.update_rule(rule_id, body.model_dump(exclude_unset=True))
    if not rule:
        raise HTTPException(status_code=404, detail="Alert rule not found")

    return rule.to_dict()
