"""
Dashboard API routes.

Provides aggregated views for the browser client.
"""

from fastapi import APIRouter, Request

from ..summary import build_dashboard, build_topology, group_by_location

router = APIRouter()


@router.get("/dashboard")
async def get_dashboard(request: Request) -> dict:
    """
    Get dashboard summary.

    Device, port, health and open-alert counts in one call.
    """
    return build_dashboard(request.app.state.store)


@router.get("/locations")
async def get_locations(request: Request) -> list[dict]:
    """Devices grouped by physical location."""
    return group_by_location(request.app.state.store)


@router.get("/topology")
async def get_topology(request: Request) -> dict:
    """Device graph built from port connections."""
    return build_topology(request.app.state.store)
