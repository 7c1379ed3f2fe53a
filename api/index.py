"""Vercel serverless entrypoint for the meal feed API."""

from __future__ import annotations

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from meal_feed.api.app import create_app  # noqa: E402
from meal_feed.containers import build_container  # noqa: E402

app = create_app(build_container())

__all__ = ["app"]
