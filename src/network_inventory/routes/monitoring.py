"""
Monitoring control API routes.
"""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/status")
async def get_monitoring_status(request: Request) -> dict:
    """Loop state and the summary of the last cycle."""
    return request.app.state.monitor.status()


@router.post("/run")
async def run_monitoring_cycle(request: Request) -> dict:
    """
    Run one monitoring cycle now.

    Waits for the cycle to finish and returns its summary.
    """
    monitor = request.app.state.monitor
    summary = await monitor.run_cycle()
    return {"status": "completed", "summary": summary}
