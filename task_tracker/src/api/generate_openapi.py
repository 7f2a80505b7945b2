"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

This script imports the FastAPI application instance and serializes its OpenAPI
schema to the interfaces/openapi.json file so that API clients and documentation
tools can consume a stable schema without running the server.

Usage:
    python -m src.api.generate_openapi
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .main import app, openapi_tags

logger = logging.getLogger(__name__)

# <container_root>/interfaces
_DEFAULT_OUT_DIR = Path(__file__).resolve().parents[2] / "interfaces"


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the schema lists every tag from openapi_tags without overriding
    tag definitions that are already present.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


# PUBLIC_INTERFACE
def generate_openapi(out_dir: Optional[Union[str, Path]] = None) -> Path:
    """Write the app's OpenAPI schema to <out_dir>/openapi.json and return the path."""
    schema = app.openapi()
    _ensure_tags(schema)

    target_dir = Path(out_dir) if out_dir is not None else _DEFAULT_OUT_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    out_path = target_dir / "openapi.json"
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    logger.info("Wrote OpenAPI schema to: %s", out_path)
    return out_path


if __name__ == "__main__":
    generate_openapi()
