"""
Engine Supervisor

State machine coordinating one long-lived engine process:

    IDLE --start--> BUSY --stop / game over--> IDLE
      ^               |
      |          pipe failure
      |          or timeout
      |               v
      +--respawn-- FAILED

The supervisor is not internally synchronized. Callers must serialize every
operation (see chess_eval.service.EvaluationService).
"""

import logging
import os
import time
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Optional

import chess

from chess_eval.config import EngineConfig
from chess_eval.engine.bridge import ProcessBridge
from chess_eval.errors import (
    EngineBusyError,
    EngineCrashedError,
    EngineTimeoutError,
    EngineUnavailableError,
    InvalidInputError,
    NotEvaluatingError,
)
from chess_eval.evaluation.types import Evaluation, GameOutcome
from chess_eval.protocol.accumulator import EvaluationAccumulator

logger = logging.getLogger(__name__)

BridgeFactory = Callable[[], ProcessBridge]


class EngineState(Enum):
    IDLE = "idle"
    BUSY = "busy"
    FAILED = "failed"


def parse_position(fen: str) -> chess.Board:
    """
    Parse and validate a FEN string.

    Args:
        fen: Position in Forsyth-Edwards Notation

    Returns:
        The position as a board

    Raises:
        InvalidInputError: If the FEN is malformed or describes an illegal
            position (wrong king count, pawns on back ranks, side not to
            move in check, ...)
    """
    if not isinstance(fen, str) or not fen.strip():
        raise InvalidInputError(f"Invalid FEN: {fen!r}")

    try:
        board = chess.Board(fen.strip())
    except ValueError as e:
        raise InvalidInputError(f"Invalid FEN: {e}") from e

    status = board.status()
    if status != chess.STATUS_VALID:
        raise InvalidInputError(f"Illegal position ({status!r}): {fen}")

    return board


def game_outcome(board: chess.Board) -> Optional[GameOutcome]:
    """Outcome of a position with no legal moves, None if play goes on."""
    if board.is_checkmate():
        return GameOutcome.BLACK_WINS if board.turn == chess.WHITE else GameOutcome.WHITE_WINS
    if board.is_stalemate():
        return GameOutcome.DRAW
    return None


class EngineSupervisor:
    """
    Drives a UCI engine through repeated analysis cycles.

    Attributes:
        config: Engine configuration
        bridge: Bridge to the running engine process
        state: IDLE, BUSY or FAILED
        current_position: Position under analysis (set while BUSY)
        accumulator: Analysis lines collected for the current position

    Methods:
        start: Begin analysing a position, stopping any analysis in flight
        poll: Collect engine output and return the current evaluation
        stop: Halt the analysis and wait for the engine to settle
        set_thread_count: Configure engine search threads
        respawn: Replace a failed engine process
        close: Shut the engine down
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        bridge_factory: Optional[BridgeFactory] = None,
    ):
        """
        Spawn the engine.

        Args:
            config: Engine configuration (default: EngineConfig())
            bridge_factory: Callable returning a fresh bridge; defaults to
                launching ``config.engine_path``

        Raises:
            FileNotFoundError: If no engine binary can be found
        """
        self.config = config or EngineConfig()
        self._bridge_factory = bridge_factory or self._spawn_process

        self.state = EngineState.IDLE
        self.current_position: Optional[chess.Board] = None
        self.accumulator = EvaluationAccumulator()

        self.bridge = self._bridge_factory()
        try:
            self._configure_engine()
        except EngineCrashedError:
            self.bridge.close()
            raise

    @property
    def busy(self) -> bool:
        return self.state == EngineState.BUSY

    @property
    def failed(self) -> bool:
        return self.state == EngineState.FAILED

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def start(self, fen: str):
        """
        Start evaluating a position.

        Any analysis already running is stopped first.

        Args:
            fen: Position to analyse

        Raises:
            InvalidInputError: If the FEN is malformed or illegal; nothing is
                sent to the engine
            EngineUnavailableError: If the engine needs a respawn
        """
        self._assert_available()

        if self.busy:
            self.stop()

        self._assert_not_busy()

        board = parse_position(fen)

        self.current_position = board
        self.accumulator.clear()

        self._send(f"position fen {board.fen()}")
        self._send("go")
        self.state = EngineState.BUSY

        logger.info(f"Evaluation started: {board.fen()}")

    def poll(self) -> Optional[Evaluation]:
        """
        Get the current evaluation of the position under analysis.

        A checkmate or stalemate stops the analysis and returns an
        evaluation carrying only the outcome.

        Returns:
            Current evaluation, or None if the engine has not reported any
            analysis yet

        Raises:
            NotEvaluatingError: If no evaluation is running
            EngineUnavailableError: If the engine needs a respawn
        """
        self._assert_available()

        if not self.busy:
            raise NotEvaluatingError()

        board = self.current_position
        if board is None:
            raise InvalidInputError("No position under evaluation")

        with self._engine_io():
            lines = self.bridge.drain_available()
        self.accumulator.process_lines(lines)

        outcome = game_outcome(board)
        if outcome is not None:
            logger.info(f"Game over in evaluated position: {outcome.value}")
            self.stop()
            return Evaluation.finished(outcome)

        return self.accumulator.derive_evaluation(board.turn)

    def stop(self):
        """
        Stop the current evaluation, if any, and wait until the engine is
        ready to receive new commands.

        Raises:
            EngineTimeoutError: If the engine does not acknowledge in time
            EngineUnavailableError: If the engine needs a respawn
        """
        self._assert_available()

        was_busy = self.busy
        self._send("stop")
        self.wait_until_ready()

        self.state = EngineState.IDLE
        self.current_position = None
        self.accumulator.clear()

        if was_busy:
            logger.info("Evaluation stopped")

    def wait_until_ready(self):
        """
        Send ``isready`` and block until ``readyok`` arrives.

        Any other output received meanwhile is discarded.

        Raises:
            EngineTimeoutError: If ``config.ready_timeout`` elapses first
            EngineCrashedError: If the engine dies while waiting
        """
        self._send("isready")

        timeout = self.config.ready_timeout
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    self._mark_failed(f"no readyok within {timeout}s")
                    raise EngineTimeoutError(
                        f"Engine did not acknowledge isready within {timeout}s"
                    )

            with self._engine_io():
                line = self.bridge.receive(timeout=remaining)

            if line == "readyok":
                return

    def set_thread_count(self, n_threads: int):
        """Configure the number of search threads."""
        self._assert_available()
        self._send(f"setoption name Threads value {n_threads}")

    def auto_set_thread_count(self) -> int:
        """
        Configure one search thread per CPU core.

        Returns:
            The number of cores found
        """
        n_cores = os.cpu_count() or 1
        self.set_thread_count(n_cores)
        return n_cores

    def respawn(self):
        """
        Replace the engine process with a fresh one.

        Raises:
            EngineBusyError: If an evaluation is running; stop it first
        """
        self._assert_not_busy()

        logger.info("Respawning engine process")
        self.bridge.close()

        self.bridge = self._bridge_factory()
        self.state = EngineState.IDLE
        self.current_position = None
        self.accumulator.clear()
        self._configure_engine()

    def close(self):
        """Shut down the engine process."""
        self.bridge.close()
        self.state = EngineState.IDLE
        self.current_position = None
        self.accumulator.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _spawn_process(self) -> ProcessBridge:
        return ProcessBridge(
            self.config.resolve_engine_path(),
            write_interval=self.config.write_interval,
            shutdown_timeout=self.config.shutdown_timeout,
        )

    def _configure_engine(self):
        n_threads = self.config.resolve_threads()
        if n_threads is not None:
            self.set_thread_count(n_threads)

    def _assert_available(self):
        if self.failed:
            raise EngineUnavailableError(
                "Engine process is unavailable; respawn it first"
            )

    def _assert_not_busy(self):
        if self.busy:
            raise EngineBusyError()

    def _send(self, line: str):
        with self._engine_io():
            self.bridge.send(line)

    def _mark_failed(self, reason: str):
        logger.error(f"Engine marked as failed: {reason}")
        self.state = EngineState.FAILED
        self.current_position = None
        self.accumulator.clear()

    @contextmanager
    def _engine_io(self):
        try:
            yield
        except EngineCrashedError as e:
            self._mark_failed(str(e))
            raise
