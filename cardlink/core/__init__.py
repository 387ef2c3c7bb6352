"""Shared identifiers and helpers used across layers."""
from __future__ import annotations

SERVICE_NAME = "cardlink"
