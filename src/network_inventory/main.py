"""
Network Inventory FastAPI Application.

Serves the REST API, the single-page browser client, and runs the device
health monitor in the background.
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from . import __version__
from .config import InventoryConfig
from .monitoring import MonitoringService
from .routes import alert_rules, alerts, dashboard, device_health, devices, exports, monitoring, ports
from .store import InventoryStore

logger = logging.getLogger(__name__)

MODULE_DIR = Path(__file__).parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    config: InventoryConfig = app.state.config
    monitor: MonitoringService = app.state.monitor

    logger.info(f"Network Inventory starting up ({config.mode} mode)")

    if config.monitoring_enabled:
        await monitor.start()
    else:
        logger.warning("Monitoring disabled by configuration")

    logger.info(f"Network Inventory ready on port {config.port}")
    yield

    await monitor.stop()
    logger.info("Network Inventory shutting down...")


def create_app(config: Optional[InventoryConfig] = None) -> FastAPI:
    """Create FastAPI application."""
    config = config or InventoryConfig.from_env()

    app = FastAPI(
        title="Network Inventory",
        description="Network device inventory and health dashboard",
        version=__version__,
        lifespan=lifespan,
    )

    store = InventoryStore(seed=config.seed_data)
    app.state.config = config
    app.state.store = store
    app.state.monitor = MonitoringService.from_config(config, store)

    # CORS for local development of the client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])
    app.include_router(devices.router, prefix="/api/devices", tags=["devices"])
    app.include_router(ports.router, prefix="/api/ports", tags=["ports"])
    app.include_router(alerts.router, prefix="/api/alerts", tags=["alerts"])
    app.include_router(device_health.router, prefix="/api/device-health", tags=["device-health"])
    app.include_router(alert_rules.router, prefix="/api/alert-rules", tags=["alert-rules"])
    app.include_router(monitoring.router, prefix="/api/monitoring", tags=["monitoring"])
    app.include_router(exports.router, prefix="/api/exports", tags=["exports"])

    # Browser client
    templates = Jinja2Templates(directory=str(MODULE_DIR / "web_templates"))
    app.mount("/static", StaticFiles(directory=str(MODULE_DIR / "web_static")), name="static")

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def index(request: Request):
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "site_name": config.site_name,
                "refresh_ms": config.ui_refresh_seconds * 1000,
                "version": __version__,
            },
        )

    # Health check
    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "service": "network-inventory",
            "monitoring": app.state.monitor.running,
        }

    return app


app = create_app()


def main():
    """Entry point for network-inventory CLI."""
    import argparse

    parser = argparse.ArgumentParser(description="Network Inventory")
    parser.add_argument("--config", type=str, help="Path to config file")
    parser.add_argument("--host", type=str, help="Host to bind to")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--log-level", type=str, help="Log level")
    args = parser.parse_args()

    # Load configuration
    if args.config:
        config = InventoryConfig.from_yaml(Path(args.config))
    else:
        config = InventoryConfig.from_env()

    # Override with CLI args
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.log_level:
        config.log_level = args.log_level

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        sys.exit(1)

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
