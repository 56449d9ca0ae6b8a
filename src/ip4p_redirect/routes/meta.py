"""Meta endpoints — health."""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(prefix="/-", tags=["meta"])


@router.get("/health")
def health():
    return {"status": "ok", "service": "ip4p-redirect"}
