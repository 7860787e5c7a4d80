"""
Device health API routes.

Health records are normally written by the monitoring loop; PUT allows an
external checker to report results directly.
"""

from fastapi import APIRouter, HTTPException, Request

from .._types import DeviceHealth
from ..schemas import DeviceHealthUpdate

router = APIRouter()


@router.get("")
async def list_device_health(request: Request) -> list[dict]:
    store = request.app.state.store
    return [h.to_dict() for h in store.get_all_device_health()]


@router.get("/{device_id}")
async def get_device_health(device_id: str, request: Request) -> dict:
    store = request.app.state.store

    health = store.get_device_health(device_id)
    if not health:
        raise HTTPException(status_code=404, detail="Device health not found")

    return health.to_dict()


@router.put("/{device_id}")
async def put_device_health(
    device_id: str,
    body: DeviceHealthUpdate,
    request: Request,
) -> dict:
    """Replace the health record of a device."""
    store = request.app.state.store

    health = store.update_device_health(device_id, DeviceHealth(
        device_id=device_id,
        is_online=body.is_online,
        response_time=round(body.response_time) if body.response_time is not None else None,
        uptime=round(body.uptime),
        last_online=body.last_online,
        last_offline=body.last_offline,
        consecutive_failures=body.consecutive_failures,
    ))
    if not health:
        raise HTTPException(status_code=404, detail="Device not found")

    return health.to_dict()
