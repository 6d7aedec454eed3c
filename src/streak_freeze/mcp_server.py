"""MCP server for streak-freeze.

Exposes streak status, check-in and manual freeze spending as MCP tools.
Run via: python3 -m streak_freeze.mcp_server
"""
from __future__ import annotations

import functools
from typing import Any

from mcp.server.fastmcp import FastMCP

from streak_freeze.errors import StorageUnavailable

mcp = FastMCP(name="streak-freeze")


@functools.lru_cache(maxsize=1)
def _get_service():
    """One service per process, so every tool call shares its lock."""
    from streak_freeze.cli import build_service
    return build_service()


@mcp.tool()
async def get_streak_status() -> dict[str, Any]:
    """Get current streak, held freezes, max freezes and progress to the next freeze."""
    service = _get_service()
    try:
        return (await service.status()).to_dict()
    except StorageUnavailable as exc:
        return {"error": f"Storage unavailable: {exc}"}


@mcp.tool()
async def check_streak() -> dict[str, Any]:
    """Check in for today: grows, preserves (with freezes) or resets the streak."""
    service = _get_service()
    try:
        result = await service.reconcile()
    except StorageUnavailable as exc:
        return {"error": f"Storage unavailable: {exc}"}
    if result is None:
        return {"skipped": True}
    status = await service.status()
    return {
        "outcome": result.outcome.value,
        "changed": result.changed,
        "missed_days": result.missed_days,
        "freezes_spent": result.freezes_spent,
        "freeze_awarded": result.freeze_awarded,
        **status.to_dict(),
    }


@mcp.tool()
async def use_streak_freeze() -> dict[str, Any]:
    """Spend one streak freeze manually."""
    service = _get_service()
    try:
        result = await service.spend_one_freeze()
    except StorageUnavailable as exc:
        return {"error": f"Storage unavailable: {exc}"}
    if result is None:
        return {"skipped": True}
    return {"spent": result.spent, **result.status.to_dict()}


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
