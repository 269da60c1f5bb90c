from __future__ import annotations

from .service import FactionService

__all__ = ["FactionService"]
