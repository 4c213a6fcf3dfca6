# gatekeeper/api/routers/metrics.py

from typing import Annotated

from fastapi import APIRouter, Depends

from gatekeeper.api.dependencies import get_metrics
from gatekeeper.observability.metrics import MetricsCollector

router = APIRouter()


@router.get("/metrics")
async def metrics(collector: Annotated[MetricsCollector, Depends(get_metrics)]):
    return collector.export_metrics()
