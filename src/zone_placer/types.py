"""Placement result types."""

from __future__ import annotations

from pydantic import BaseModel


class Placement(BaseModel):
    claim: str
    zones: list[str]
    zone: str
