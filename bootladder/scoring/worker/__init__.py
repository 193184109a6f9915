"""Draw worker pool for parallel bootstrap evaluation."""

from __future__ import annotations

from .pool import DrawChunk, DrawPool, plan_draw_chunks

__all__ = ["DrawChunk", "DrawPool", "plan_draw_chunks"]
