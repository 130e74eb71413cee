"""Payload dimension extraction."""

from __future__ import annotations

from .dimensions import DimensionExtractor, branch_from_ref

__all__ = ["DimensionExtractor", "branch_from_ref"]
