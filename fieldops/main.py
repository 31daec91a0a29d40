from __future__ import annotations

import logging

from fastapi import FastAPI

from fieldops.core.logging import setup_logging
from fieldops.routers.billing import router as billing_router
from fieldops.routers.equipment import router as equipment_router
from fieldops.routers.jobs import router as jobs_router

setup_logging()

logger = logging.getLogger("fieldops")

app = FastAPI(title="Field Service Operations API")

app.include_router(jobs_router)
app.include_router(billing_router)
app.include_router(equipment_router)


@app.get("/api/health", tags=["health"])
def health():
    return {"ok": True}


logger.info("startup: routers registered")
