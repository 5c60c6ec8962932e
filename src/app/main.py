# src/app/main.py
from __future__ import annotations
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.app import deps
from src.app.config import settings
from src.app.routers.keywords import router as keywords_router
from src.app.routers.recipes import router as recipes_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(title="PinClicks Notion Sync", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipes_router)
app.include_router(keywords_router)


@app.on_event("shutdown")
async def shutdown() -> None:
    await deps.close_store()


@app.get("/health")
def health():
    return {"ok": True, "env": settings.APP_ENV, "notion_configured": not settings.missing_notion_keys()}
