"""
Session manager for colony simulations.

Each session wraps one ColonySimulation plus its MetricsCollector.
Sessions live in memory only; there is no save format.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from apiary.core.config import ColonyConfig
from apiary.core.engine import ColonySimulation, TickReport
from apiary.metrics.collector import MetricsCollector

logger = logging.getLogger(__name__)


@dataclass
class SimulationSession:
    """A running colony."""

    id: str
    name: str
    config: ColonyConfig
    sim: ColonySimulation
    collector: MetricsCollector

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "current_tick": self.sim.current_tick,
            "clock": self.sim.clock,
            "tile_count": len(self.sim.graph),
            "worker_count": len(self.sim.workers),
        }


class SessionManager:
    """Manages multiple in-memory colony sessions."""

    def __init__(self) -> None:
        self.sessions: dict[str, SimulationSession] = {}

    def create_session(
        self,
        config: ColonyConfig | None = None,
        name: str | None = None,
    ) -> SimulationSession:
        """Create a new colony session."""
        if config is None:
            config = ColonyConfig()

        session_id = uuid.uuid4().hex[:8]
        session = SimulationSession(
            id=session_id,
            name=name or config.experiment_name,
            config=config,
            sim=ColonySimulation(config),
            collector=MetricsCollector(),
        )
        self.sessions[session_id] = session
        logger.debug("Created session %s (%s)", session_id, session.name)
        return session

    def get_session(self, session_id: str) -> SimulationSession:
        """Get a session by ID.

        Raises KeyError if not found.
        """
        if session_id not in self.sessions:
            raise KeyError(f"Session '{session_id}' not found")
        return self.sessions[session_id]

    def step(
        self, session_id: str, n: int = 1, elapsed: float | None = None,
    ) -> list[TickReport]:
        """Advance a session by N ticks, collecting metrics for each."""
        session = self.get_session(session_id)
        reports: list[TickReport] = []
        for _ in range(n):
            report = session.sim.tick(elapsed)
            session.collector.collect(session.sim, report)
            reports.append(report)
        return reports

    def reset_session(self, session_id: str) -> SimulationSession:
        """Rebuild a session from its config, keeping its ID and name."""
        session = self.get_session(session_id)
        session.sim = ColonySimulation(session.config)
        session.collector = MetricsCollector()
        return session

    def delete_session(self, session_id: str) -> None:
        self.get_session(session_id)
        del self.sessions[session_id]

    def list_sessions(self) -> list[dict[str, Any]]:
        return [s.summary() for s in self.sessions.values()]
