"""CLI command implementations exposed via `cmdinclude.ui.cli`."""

from __future__ import annotations

from .cache import cache_app
from .expand import expand


__all__ = ["cache_app", "expand"]
