"""
Export API routes for CSV downloads.
"""

import csv
import io
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

router = APIRouter()


def _csv_response(rows: list[dict], fieldnames: list[str], prefix: str) -> StreamingResponse:
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=fieldnames, extrasaction="ignore")
    writer.writeheader()
    writer.writerows(rows)

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")

    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={prefix}_{timestamp}.csv"
        },
    )


@router.get("/csv/devices")
async def export_devices_csv(request: Request) -> StreamingResponse:
    """
    Export device inventory as CSV.

    Each row carries the device's latest health, if it has been checked.
    """
    store = request.app.state.store

    rows = []
    for device in store.get_devices():
        row = device.to_dict()
        health = store.get_device_health(device.id)
        row["port_count"] = len(store.get_ports_by_device(device.id))
        row["online"] = health.is_online if health else ""
        row["response_time"] = health.response_time if health else ""
        row["uptime"] = health.uptime if health else ""
        rows.append(row)

    return _csv_response(
        rows,
        fieldnames=[
            "id",
            "name",
            "type",
            "model",
            "ip_address",
            "mac_address",
            "location",
            "status",
            "port_count",
            "online",
            "response_time",
            "uptime",
        ],
        prefix="device_inventory",
    )


@router.get("/csv/alerts")
async def export_alerts_csv(request: Request) -> StreamingResponse:
    """Export alert history as CSV, newest first."""
    store = request.app.state.store

    rows = []
    for alert in store.get_alerts():
        row = alert.to_dict()
        device = store.get_device(alert.device_id)
        row["device_name"] = device.name if device else ""
        rows.append(row)

    return _csv_response(
        rows,
        fieldnames=[
            "id",
            "timestamp",
            "device_id",
            "device_name",
            "type",
            "severity",
            "message",
            "acknowledged",
            "acknowledged_by",
            "acknowledged_at",
            "rule_id",
        ],
        prefix="alerts",
    )
