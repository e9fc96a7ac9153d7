"""
Pydantic models for API request/response validation.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any


# === Simulation ===

class CreateSessionRequest(BaseModel):
    config: dict[str, Any] | None = None
    name: str | None = None


class StepRequest(BaseModel):
    n: int = Field(default=1, ge=1, le=10000)
    elapsed: float | None = Field(default=None, ge=0.0)


class SessionSummary(BaseModel):
    id: str
    name: str
    current_tick: int
    clock: float
    tile_count: int
    worker_count: int


class SessionResponse(SessionSummary):
    config: dict[str, Any]


class StepResponse(BaseModel):
    session: SessionSummary
    reports: list[dict[str, Any]]


# === Colony ===

class CoordinateRequest(BaseModel):
    q: int
    r: int


class WorkerRequest(BaseModel):
    # Omit q/r to let the assignment ladder choose
    q: int | None = None
    r: int | None = None
    cost: int | None = Field(default=None, ge=0)


class WorkerResponse(BaseModel):
    id: str
    q: int
    r: int
    assignment: str
    generation_rate: float


class TileResponse(BaseModel):
    q: int
    r: int
    kind: str


class ClickResponse(BaseModel):
    resource: str
    amount: int
    wax: int
    nectar: int
