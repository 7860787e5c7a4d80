"""
Port API routes.
"""

from fastapi import APIRouter, HTTPException, Request, Response

from .._types import Port
from ..schemas import PortCreate, PortUpdate

router = APIRouter()


@router.get("")
async def list_ports(request: Request) -> list[dict]:
    store = request.app.state.store
    return [p.to_dict() for p in store.get_ports()]


@router.get("/{port_id}")
async def get_port(port_id: str, request: Request) -> dict:
    store = request.app.state.store

    port = store.get_port(port_id)
    if not port:
        raise HTTPException(status_code=404, detail="Port not found")

    return port.to_dict()


@router.post("", status_code=201)
async def create_port(body: PortCreate, request: Request) -> dict:
    """Add a port. The owning device must exist."""
    store = request.app.state.store

    if not store.get_device(body.device_id):
        raise HTTPException(status_code=400, detail=f"Unknown device: {body.device_id}")

    port = store.create_port(Port(**body.model_dump()))
    return port.to_dict()


@router.patch("/{port_id}")
async def update_port(port_id: str, body: PortUpdate, request: Request) -> dict:
    store = request.app.state.store

    changes = body.model_dump(exclude_unset=True)
    if "device_id" in changes and not store.get_device(changes["device_id"]):
        raise HTTPException(status_code=400, detail=f"Unknown device: {changes['device_id']}")

    port = store.update_port(port_id, changes)
    if not port:
        raise HTTPException(status_code=404, detail="Port not found")

    return port.to_dict()


@router.delete("/{port_id}", status_code=204)
async def delete_port(port_id: str, request: Request) -> Response:
    store = request.app.state.store

    if not store.delete_port(port_id):
        raise HTTPException(status_code=404, detail="Port not found")

    return Response(status_code=204)
