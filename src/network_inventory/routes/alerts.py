"""
Alert API routes.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response

from .._types import Alert, AlertSeverity
from ..schemas import AcknowledgeRequest, AlertCreate

router = APIRouter()


@router.get("")
async def list_alerts(
    request: Request,
    acknowledged: Optional[bool] = Query(None, description="Filter by acknowledgement"),
    severity: Optional[AlertSeverity] = Query(None, description="Filter by severity"),
) -> list[dict]:
    """List alerts, newest first."""
    store = request.app.state.store

    alerts = store.get_alerts(acknowledged=acknowledged, severity=severity)
    return [a.to_dict() for a in alerts]


@router.get("/device/{device_id}")
async def list_device_alerts(device_id: str, request: Request) -> list[dict]:
    store = request.app.state.store
    return [a.to_dict() for a in store.get_alerts_by_device(device_id)]


@router.get("/{alert_id}")
async def get_alert(alert_id: str, request: Request) -> dict:
    store = request.app.state.store

    alert = store.get_alert(alert_id)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")

    return alert.to_dict()


@router.post("", status_code=201)
async def create_alert(body: AlertCreate, request: Request) -> dict:
    """Raise an alert manually."""
    store = request.app.state.store

    if not store.get_device(body.device_id):
        raise HTTPException(status_code=400, detail=f"Unknown device: {body.device_id}")

    alert = store.create_alert(Alert(**body.model_dump()))
    return alert.to_dict()


@router.patch("/{alert_id}/acknowledge")
async def acknowledge_alert(
    alert_id: str,
    body: AcknowledgeRequest,
    request: Request,
) -> dict:
    store = request.app.state.store

    alert = store.acknowledge_alert(alert_id, body.acknowledged_by)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")

    return alert.to_dict()


@router.delete("/{alert_id}", status_code=204)
async def delete_alert(alert_id: str, request: Request) -> Response:
    store = request.app.state.store

    if not store.delete_alert(alert_id):
        raise HTTPException(status_code=404, detail="Alert not found")

    return Response(status_code=204)
