"""
Session Manager - Creates and runs match sessions.

LIFECYCLE:
1. Caller submits a MatchConfig -> session created (in-memory only)
2. run() plays the whole match with the configured decision sources
3. The final scores stay on the session until it is ended
4. end_session() removes it and drops its state

There is no persistence: a session lives exactly as long as the
manager holds it, and a match is reproducible from its config alone.
"""

from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum

from ..bots import DecisionSource, FirstLegalPolicy, RandomPolicy
from ..engine_core.state import GameState, VictoryType
from ..games.startups.catalog import Catalog
from ..games.startups.setup import create_game_state
from ..schemas import MatchConfig, PolicyName
from .game_loop import GameLoop
from .narration import Narrator

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a match session."""
    CREATED = "created"  # Waiting for run()
    RUNNING = "running"
    GAME_OVER = "game_over"
    FAILED = "failed"  # Aborted by an engine fault
    ABANDONED = "abandoned"  # Ended before completion


@dataclass
class Session:
    """
    An ephemeral match session.

    Contains:
    - The validated config
    - The game state and its loop
    - The final scores, once the match is over
    """
    session_id: str
    config: MatchConfig
    created_at: float
    loop: GameLoop

    state: SessionState = SessionState.CREATED
    scores: dict[str, dict[VictoryType, int]] | None = None
    error: str | None = None

    @property
    def game_state(self) -> GameState:
        return self.loop.state

    def is_active(self) -> bool:
        """Check if session can still be run."""
        return self.state in {SessionState.CREATED, SessionState.RUNNING}


def default_sources(config: MatchConfig) -> dict[str, DecisionSource]:
    """
    One bot per player, as named by the config.

    Random bots get their own seed derived from the match seed, so
    results do not depend on the order decisions are collected in.
    """
    if config.policy == PolicyName.FIRST:
        return {pid: FirstLegalPolicy() for pid in config.player_ids}
    return {
        pid: RandomPolicy(seed=config.seed * 1000 + index)
        for index, pid in enumerate(sorted(config.player_ids))
    }


class SessionManager:
    """
    Manages match sessions.

    Responsibilities:
    - Create sessions from validated configs
    - Run matches and keep their results
    - Clean up ended sessions
    """

    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        config: MatchConfig,
        sources: dict[str, DecisionSource] | None = None,
        narrator: Narrator | None = None,
    ) -> Session:
        """
        Create a new match session.

        Args:
            config: Validated match configuration
            sources: Decision source per player (bots from config if omitted)
            narrator: Narration sink (logging if omitted)

        Returns:
            New Session ready to run
        """
        state = create_game_state(config.player_ids, seed=config.seed, catalog=self.catalog)
        loop = GameLoop(
            state,
            sources=sources or default_sources(config),
            narrator=narrator,
            decision_timeout=config.decision_timeout,
            parallel_decisions=config.parallel_decisions,
        )
        session = Session(
            session_id=str(uuid.uuid4()),
            config=config,
            created_at=time.time(),
            loop=loop,
        )
        self._sessions[session.session_id] = session
        logger.info("Session %s created for %s", session.session_id, ", ".join(config.player_ids))
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def run(self, session_id: str) -> dict[str, dict[VictoryType, int]]:
        """
        Play the session's match to the end.

        Raises:
            KeyError: unknown session
            ValueError: the session was already run
            EngineError: the match was aborted
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session not found: {session_id}")
        if session.state != SessionState.CREATED:
            raise ValueError(f"Session {session_id} is {session.state.value}")

        session.state = SessionState.RUNNING
        try:
            session.scores = session.loop.play_game()
        except Exception as e:
            session.state = SessionState.FAILED
            session.error = str(e)
            logger.error("Session %s aborted: %s", session_id, e)
            raise
        session.state = SessionState.GAME_OVER
        return session.scores

    def end_session(self, session_id: str, reason: str = "completed") -> None:
        """
        End a session and drop it from memory.

        A session that did not finish is marked abandoned.
        """
        session = self._sessions.pop(session_id, None)
        if session and session.is_active():
            session.state = SessionState.ABANDONED
        if session:
            logger.info("Session %s ended (%s)", session_id, reason)

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions that have not finished."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]
