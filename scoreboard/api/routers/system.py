"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from ...core import ENV, isoformat, utcnow
from ..responses import ok

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, Any]:
    """Simple readiness probe."""

    return ok(message="Server is healthy", timestamp=isoformat(utcnow()), environment=ENV)


__all__ = ["router"]
