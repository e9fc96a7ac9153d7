"""Simulation session management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from apiary.api.schemas import (
    CreateSessionRequest,
    SessionResponse,
    SessionSummary,
    StepRequest,
    StepResponse,
)
from apiary.core.config import ColonyConfig

router = APIRouter()


def _session_response(session) -> dict:
    return {**session.summary(), "config": session.config.to_dict()}


@router.post("/sessions", response_model=SessionResponse)
def create_session(req: CreateSessionRequest, request: Request):
    mgr = request.app.state.session_manager

    config = None
    if req.config:
        try:
            config = ColonyConfig.from_dict(req.config)
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    session = mgr.create_session(config=config, name=req.name)
    return _session_response(session)


@router.get("/sessions", response_model=list[SessionSummary])
def list_sessions(request: Request):
    mgr = request.app.state.session_manager
    return mgr.list_sessions()


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        session = mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return _session_response(session)


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        mgr.delete_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return {"deleted": True}


@router.post("/sessions/{session_id}/step", response_model=StepResponse)
def step_session(session_id: str, req: StepRequest, request: Request):
    mgr = request.app.state.session_manager
    try:
        reports = mgr.step(session_id, n=req.n, elapsed=req.elapsed)
        session = mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return {
        "session": session.summary(),
        "reports": [r.to_dict() for r in reports],
    }


@router.post("/sessions/{session_id}/reset", response_model=SessionResponse)
def reset_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        session = mgr.reset_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return _session_response(session)
