# src/wavefinder/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance. Route handlers live in
`wavefinder.api.routes`; ranking lives in `wavefinder.recommender`.

Run with: `uvicorn wavefinder.api.app:app` (install the `serve` extra).
"""

from __future__ import annotations

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from wavefinder import __version__
from wavefinder.core.logging import configure_logging

from .routes import router

# The API serves JSON only. The trip-planner page (preference form, weight
# sliders, destination cards) is a separate browser app, so cross-origin
# access is opt-in:
# - WAVEFINDER_CORS_ORIGINS: comma-separated origins of deployed planner builds
# - WAVEFINDER_CORS_ALLOW_LOCAL=1: also accept any localhost port while developing it
LOCALHOST_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def _cors_options() -> dict | None:
    origins = [o.strip() for o in os.getenv("WAVEFINDER_CORS_ORIGINS", "").split(",") if o.strip()]
    allow_local = os.getenv("WAVEFINDER_CORS_ALLOW_LOCAL", "0").strip().lower() in {"1", "true", "yes"}
    if not origins and not allow_local:
        return None
    # Preference payloads carry no cookies or auth, and only GET/POST routes exist.
    return {
        "allow_origins": origins,
        "allow_origin_regex": LOCALHOST_ORIGIN_REGEX if allow_local else None,
        "allow_credentials": False,
        "allow_methods": ["GET", "POST"],
        "allow_headers": ["Content-Type"],
    }


configure_logging()

app = FastAPI(title="WaveFinder API", version=__version__)

cors = _cors_options()
if cors is not None:
    app.add_middleware(CORSMiddleware, **cors)

app.include_router(router)
