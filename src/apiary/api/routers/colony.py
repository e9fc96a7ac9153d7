"""Colony endpoints: grid view, tile detail, building, workers, clicks."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from apiary.api.schemas import (
    ClickResponse,
    CoordinateRequest,
    TileResponse,
    WorkerRequest,
    WorkerResponse,
)
from apiary.core.engine import giant_scale
from apiary.core.errors import AlreadyOccupiedError, ColonyError
from apiary.core.hex_coords import GridCoordinate

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_session(request: Request, session_id: str):
    mgr = request.app.state.session_manager
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


def _colony_error(exc: ColonyError) -> HTTPException:
    logger.warning("Colony action rejected: %s", exc)
    status = 409 if isinstance(exc, AlreadyOccupiedError) else 400
    return HTTPException(status_code=status, detail=str(exc))


@router.get("/{session_id}/grid")
def get_grid(session_id: str, request: Request) -> dict[str, Any]:
    """Full field: tiles, flowers with connectivity, and world positions."""
    session = _get_session(request, session_id)
    sim = session.sim
    grid = sim.graph.to_dict()
    for tile in grid["tiles"]:
        x, z = sim.to_planar_position(GridCoordinate(tile["q"], tile["r"]))
        tile["x"] = round(x, 4)
        tile["z"] = round(z, 4)
    grid["giant_scale"] = giant_scale(len(sim.workers))
    return grid


@router.get("/{session_id}/tile/{q}/{r}")
def get_tile_detail(session_id: str, q: int, r: int, request: Request) -> dict[str, Any]:
    """One cell: occupancy, connectivity, workers and buildable neighbours."""
    session = _get_session(request, session_id)
    sim = session.sim
    coord = GridCoordinate(q, r)
    tile = sim.graph.get_tile(coord)
    return {
        "q": q,
        "r": r,
        "kind": tile.kind.value if tile else None,
        "connected": sim.is_reachable_from_root(coord),
        "workers": [w.to_dict() for w in sim.economy.workers_at(coord)],
        "buildable": [[n.q, n.r] for n in sim.graph.buildable_positions(coord)],
    }


@router.get("/{session_id}/locate")
def locate(session_id: str, x: float, z: float, request: Request) -> dict[str, Any]:
    """Map a world position (e.g. a raycast hit) to its grid cell."""
    session = _get_session(request, session_id)
    try:
        coord = session.sim.from_planar_position(x, z)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"q": coord.q, "r": coord.r, "exists": session.sim.exists(coord)}


@router.post("/{session_id}/connectors", response_model=TileResponse)
def build_connector(session_id: str, req: CoordinateRequest, request: Request):
    session = _get_session(request, session_id)
    try:
        tile = session.sim.build_connector(GridCoordinate(req.q, req.r))
    except ColonyError as exc:
        raise _colony_error(exc)
    return tile.to_dict()


@router.post("/{session_id}/workers", response_model=WorkerResponse)
def spawn_worker(session_id: str, req: WorkerRequest, request: Request):
    session = _get_session(request, session_id)
    if (req.q is None) != (req.r is None):
        raise HTTPException(status_code=400, detail="Give both q and r, or neither")
    try:
        if req.q is None:
            worker = session.sim.spawn_worker(req.cost)
        else:
            worker = session.sim.spawn_worker_at(GridCoordinate(req.q, req.r), req.cost)
    except ColonyError as exc:
        raise _colony_error(exc)
    return worker.to_dict()


@router.post("/{session_id}/click", response_model=ClickResponse)
def click_tile(session_id: str, req: CoordinateRequest, request: Request):
    session = _get_session(request, session_id)
    try:
        resource, amount = session.sim.click_tile(GridCoordinate(req.q, req.r))
    except ColonyError as exc:
        raise _colony_error(exc)
    return {
        "resource": resource,
        "amount": amount,
        "wax": session.sim.economy.wax,
        "nectar": session.sim.economy.nectar,
    }


@router.get("/{session_id}/economy")
def get_economy(session_id: str, request: Request) -> dict[str, Any]:
    """Counters, worker list and affordability flags."""
    session = _get_session(request, session_id)
    return session.sim.economy.to_dict()


@router.get("/{session_id}/metrics")
def get_metrics(session_id: str, request: Request) -> dict[str, Any]:
    """Per-tick history and summary."""
    session = _get_session(request, session_id)
    return {
        "summary": session.collector.summary(),
        "history": session.collector.to_dicts(),
    }


@router.get("/{session_id}/metrics/{field_name}")
def get_metric_series(session_id: str, field_name: str, request: Request) -> dict[str, Any]:
    session = _get_session(request, session_id)
    try:
        series = session.collector.get_time_series(field_name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown metric '{field_name}'")
    return {"field": field_name, "values": series}
