"""
Device inventory API routes.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response

from .._types import Device, DeviceStatus, DeviceType
from ..schemas import DeviceCreate, DeviceUpdate

router = APIRouter()


@router.get("")
async def list_devices(
    request: Request,
    device_type: Optional[DeviceType] = Query(None, alias="type", description="Filter by device type"),
    status: Optional[DeviceStatus] = Query(None, description="Filter by status"),
    location: Optional[str] = Query(None, description="Filter by location"),
) -> list[dict]:
    """List all devices, optionally filtered."""
    store = request.app.state.store

    devices = store.get_devices(device_type=device_type, status=status, location=location)
    return [d.to_dict() for d in devices]


@router.get("/{device_id}")
async def get_device(device_id: str, request: Request) -> dict:
    store = request.app.state.store

    device = store.get_device(device_id)
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")

    return device.to_dict()


@router.get("/{device_id}/ports")
async def get_device_ports(device_id: str, request: Request) -> list[dict]:
    """Get ports for a device."""
    store = request.app.state.store
    return [p.to_dict() for p in store.get_ports_by_device(device_id)]


@router.post("", status_code=201)
async def create_device(body: DeviceCreate, request: Request) -> dict:
    store = request.app.state.store

    device = store.create_device(Device(**body.model_dump()))
    return device.to_dict()


@router.patch("/{device_id}")
async def update_device(device_id: str, body: DeviceUpdate, request: Request) -> dict:
    """
    Update a device.

    Only the fields present in the request body are changed.
    """
    store = request.app.state.store

    device = store.update_device(device_id, body.model_dump(exclude_unset=True))
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")

    return device.to_dict()


@router.delete("/{device_id}", status_code=204)
async def delete_device(device_id: str, request: Request) -> Response:
    """Delete a device together with its ports and health record."""
    store = request.app.state.store

    if not store.delete_device(device_id):
        raise HTTPException(status_code=404, detail="Device not found")

    return Response(status_code=204)
