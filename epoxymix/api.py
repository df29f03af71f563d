from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from epoxymix import __version__
from epoxymix.quality.api_history import router as history_router
from epoxymix.quality.ratio_engine import control_limits
from epoxymix.records.api_records import edit_router, router as mix_router
from epoxymix.records.models import init_db
from epoxymix.settings import AppSettings

logger = logging.getLogger(__name__)

# Create tables on import
init_db()

app = FastAPI(title="Epoxy Mix Log", version=__version__)
app.include_router(mix_router)
app.include_router(edit_router)
app.include_router(history_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/status")
def get_status() -> Dict[str, Any]:
    """Service status, control limits and active settings."""
    return {
        "service": "Epoxy Mix Log",
        "version": __version__,
        "status": "operational",
        "control_limits": control_limits(),
        "settings": AppSettings.to_dict(),
    }
