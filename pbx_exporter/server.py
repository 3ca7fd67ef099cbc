"""
FastAPI application exposing PBX metrics to Prometheus.
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Response
from fastapi.responses import HTMLResponse
from prometheus_client import CONTENT_TYPE_LATEST

from pbx_exporter import __version__
from pbx_exporter.telemetry.exposition import render_samples
from pbx_exporter.telemetry.orchestrator import ScrapeOrchestrator

logger = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>PBX Exporter</title></head>
<body>
<h1>PBX Exporter</h1>
<p><a href="/metrics">Metrics</a></p>
<p><a href="/catalog">Catalog</a></p>
</body>
</html>
"""


def create_app(orchestrator: ScrapeOrchestrator) -> FastAPI:
    """
    Create the exporter application.

    Args:
        orchestrator: Scrape orchestrator run on every /metrics request

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(title="PBX Exporter", version=__version__)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return LANDING_PAGE

    @app.get("/metrics")
    async def metrics() -> Response:
        """Run one scrape and return it in the Prometheus text format."""
        samples = await orchestrator.collect_samples()
        logger.debug(f"Scrape produced {len(samples)} samples")
        body = render_samples(samples, orchestrator.describe())
        return Response(content=body, media_type=CONTENT_TYPE_LATEST)

    @app.get("/catalog")
    async def catalog() -> List[Dict[str, Any]]:
        """List every metric the exporter may emit."""
        return [identity.model_dump(mode="json") for identity in orchestrator.describe()]

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"status": "ok", "metrics": len(orchestrator.describe())}

    return app
