"""Reserve Land Engine — FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reserve.config import settings
from reserve.api.routes_projects import router as projects_router
from reserve.api.routes_map import router as map_router
from reserve.api.routes_selection import router as selection_router
from reserve.api.routes_navigation import router as navigation_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Project boundaries, map scale, area selection and navigation for the reserve app.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projects_router, prefix="/api")
app.include_router(map_router, prefix="/api")
app.include_router(selection_router, prefix="/api")
app.include_router(navigation_router, prefix="/api")


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}

