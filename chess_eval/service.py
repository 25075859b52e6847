"""
Host-facing evaluation service.

Wraps the single EngineSupervisor of an application session behind one lock,
so that at most one operation is in flight at a time.
"""

import logging
import threading
import time
from typing import Callable, Optional

from chess_eval.config import EngineConfig
from chess_eval.engine.supervisor import BridgeFactory, EngineSupervisor
from chess_eval.errors import EngineTimeoutError
from chess_eval.evaluation.types import Evaluation

logger = logging.getLogger(__name__)


class EvaluationService:
    """Serialized entry points for hosts (UI command handlers, tools)."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        bridge_factory: Optional[BridgeFactory] = None,
        supervisor: Optional[EngineSupervisor] = None,
    ):
        """
        Args:
            config: Engine configuration, used when spawning a supervisor
            bridge_factory: Passed through to the supervisor
            supervisor: Existing supervisor to take ownership of
        """
        if supervisor is None:
            supervisor = EngineSupervisor(config, bridge_factory=bridge_factory)
        self.supervisor = supervisor
        self._lock = threading.Lock()

    def start_evaluation(self, fen: str):
        """Begin analysing ``fen``, replacing any analysis in flight."""
        with self._lock:
            self.supervisor.start(fen)

    def get_evaluation(self) -> Optional[Evaluation]:
        """Current evaluation, or None if the engine has not reported yet."""
        with self._lock:
            return self.supervisor.poll()

    def stop_evaluation(self):
        with self._lock:
            self.supervisor.stop()

    def evaluate_to_depth(
        self,
        fen: str,
        depth: int,
        poll_interval: float = 0.02,
        timeout: Optional[float] = None,
        on_update: Optional[Callable[[Evaluation], None]] = None,
    ) -> Evaluation:
        """
        Evaluate a position until the engine reaches ``depth``.

        The lock is released between polls, so other callers may interleave
        with the wait.

        Args:
            fen: Position to analyse
            depth: Target search depth
            poll_interval: Seconds between polls
            timeout: Give up after this many seconds (None = no limit)
            on_update: Optional callback receiving every new evaluation

        Returns:
            First evaluation at or beyond ``depth``, or the outcome of a
            finished game

        Raises:
            EngineTimeoutError: If ``timeout`` elapses first
        """
        if depth <= 0:
            raise ValueError(f"depth must be positive, got {depth}")

        self.start_evaluation(fen)
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            evaluation = self.get_evaluation()

            if evaluation is not None:
                if on_update is not None:
                    on_update(evaluation)

                if evaluation.outcome is not None:
                    # poll already returned the engine to idle
                    return evaluation

                if evaluation.depth >= depth:
                    self.stop_evaluation()
                    return evaluation

            if deadline is not None and time.monotonic() >= deadline:
                self.stop_evaluation()
                reached = evaluation.depth if evaluation is not None else 0
                raise EngineTimeoutError(
                    f"Depth {depth} not reached within {timeout}s (reached {reached})"
                )

            time.sleep(poll_interval)

    def close(self):
        with self._lock:
            self.supervisor.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
