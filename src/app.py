from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.api.router import router as api_router
from src.services.classification_service import ClassificationOrchestrator
from src.services.store_service import ScanRecordStore, get_store


def create_app(
    store: Optional[ScanRecordStore] = None,
    orchestrator: Optional[ClassificationOrchestrator] = None,
) -> FastAPI:
    app = FastAPI(title="Dentscan API", version="0.1.0")

    allow_origins = os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store if store is not None else get_store()
    app.state.orchestrator = orchestrator if orchestrator is not None else ClassificationOrchestrator()

    app.include_router(api_router, prefix="/v1")
    return app


app = create_app()
