"""Pydantic models for the status server responses."""
from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    ts: str


class ReadinessResponse(BaseModel):
    ready: bool
    state: str
    ts: str


class StatusResponse(BaseModel):
    version: str
    state: str
    lines_processed: int = Field(default=0, ge=0)
    replies_sent: int = Field(default=0, ge=0)
    connected_at: Optional[str] = None
    last_line_at: Optional[str] = None
    last_error: Optional[str] = None
