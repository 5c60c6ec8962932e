# src/app/services/keywords/context_store.py
"""
JSON file mirror of operator custom contexts.

The in-memory generator state is authoritative; this file only lets contexts
survive a restart.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from src.app.domain.models import CustomContext, SeasonalModifiers

logger = logging.getLogger(__name__)


def context_from_dict(data: dict[str, Any]) -> CustomContext:
    seasonal = data.get("seasonal_modifiers") or {}
    return CustomContext(
        primary_theme=str(data.get("primary_theme") or ""),
        custom_keywords=[str(k) for k in data.get("custom_keywords") or []],
        seasonal_modifiers=SeasonalModifiers(
            fall=list(seasonal.get("fall") or []),
            winter=list(seasonal.get("winter") or []),
            summer=list(seasonal.get("summer") or []),
            spring=list(seasonal.get("spring") or []),
        ),
        notes=str(data.get("notes") or ""),
    )


class CustomContextStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> dict[str, CustomContext]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("keywords.contexts_load_failed path=%s error=%s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            return {}
        return {
            domain: context_from_dict(data)
            for domain, data in raw.items()
            if isinstance(data, dict)
        }

    def save(self, contexts: dict[str, CustomContext]) -> None:
        payload = {domain: asdict(context) for domain, context in contexts.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as e:
            logger.error("keywords.contexts_save_failed path=%s error=%s", self.path, e)
