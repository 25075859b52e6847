"""
Evaluation Result Types

This module defines the values exposed to host applications: the score of a
line, a ranked continuation, the full evaluation snapshot and the outcome of
a finished game.

Convention:
    - Engines report scores relative to the side to move
    - Every score stored in a Continuation is absolute
    - Positive = White advantage, Negative = Black advantage
    - Forced mate counts are in moves, signed for the side delivering mate
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import chess


# Metric value of a forced mate when collapsing scores to centipawns
MATE_METRIC = 10000

# Scalar used by hosts to plot a decided position
OUTCOME_METRIC = 1000


class GameOutcome(Enum):
    """Result of a position with no legal continuation."""
    WHITE_WINS = "WhiteWin"
    BLACK_WINS = "BlackWin"
    DRAW = "Draw"


@dataclass(frozen=True)
class EvaluationScore:
    """
    Base class for engine scores.

    Subclasses carry a single signed integer ``value``. Scores are immutable;
    ``make_absolute`` returns a new instance.
    """

    value: int

    @property
    def is_forced_mate(self) -> bool:
        return False

    @property
    def is_material_advantage(self) -> bool:
        return False

    def as_metric(self) -> int:
        """Collapse the score to centipawns."""
        raise NotImplementedError

    def make_absolute(self, relative_to: chess.Color) -> "EvaluationScore":
        """
        Convert a side-to-move relative score to White's perspective.

        Args:
            relative_to: Side to move in the analysed position

        Returns:
            Score of the same kind, negated when Black is to move
        """
        if relative_to == chess.BLACK:
            return type(self)(-self.value)
        return self

    def to_dict(self) -> Dict[str, int]:
        raise NotImplementedError


@dataclass(frozen=True)
class MaterialAdvantage(EvaluationScore):
    """Advantage of ``value`` centipawns."""

    @property
    def is_material_advantage(self) -> bool:
        return True

    def as_metric(self) -> int:
        return self.value

    def to_dict(self) -> Dict[str, int]:
        return {"CentipawnAdvantage": self.value}


@dataclass(frozen=True)
class ForcedMate(EvaluationScore):
    """Forced mate in ``value`` moves; the sign tells which side mates."""

    @property
    def is_forced_mate(self) -> bool:
        return True

    def as_metric(self) -> int:
        # mate 0 means the side to move is already mated
        return MATE_METRIC if self.value > 0 else -MATE_METRIC

    def to_dict(self) -> Dict[str, int]:
        return {"Mate": self.value}


@dataclass(frozen=True)
class Continuation:
    """One ranked line of play with its absolute score."""

    moves: List[str]
    score: EvaluationScore
    rank: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {"continuation": list(self.moves), "score": self.score.to_dict()}


@dataclass
class Evaluation:
    """
    Snapshot of the engine's current opinion of a position.

    When ``outcome`` is set the game is over: ``continuations`` is empty and
    ``depth``/``node_count`` are zero.
    """

    depth: int = 0
    node_count: int = 0
    continuations: List[Continuation] = field(default_factory=list)
    outcome: Optional[GameOutcome] = None

    @classmethod
    def finished(cls, outcome: GameOutcome) -> "Evaluation":
        """Evaluation of a terminal position."""
        return cls(depth=0, node_count=0, continuations=[], outcome=outcome)

    @property
    def is_game_over(self) -> bool:
        return self.outcome is not None

    @property
    def best_move(self) -> Optional[str]:
        """First move of the best continuation, in UCI notation."""
        if not self.continuations or not self.continuations[0].moves:
            return None
        return self.continuations[0].moves[0]

    def absolute_score(self) -> int:
        """
        Single number summarising the evaluation from White's perspective.

        Decided games map to +/-1000 (0 for a draw), forced mates are clamped
        to the same range, otherwise the best line's centipawns are returned.

        Raises:
            ValueError: If there is no outcome and no continuation
        """
        if self.outcome is not None:
            return {
                GameOutcome.WHITE_WINS: OUTCOME_METRIC,
                GameOutcome.BLACK_WINS: -OUTCOME_METRIC,
                GameOutcome.DRAW: 0,
            }[self.outcome]

        if not self.continuations:
            raise ValueError("Evaluation has no continuation to score")

        score = self.continuations[0].score
        if score.is_forced_mate:
            return OUTCOME_METRIC if score.as_metric() > 0 else -OUTCOME_METRIC
        return score.as_metric()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation used by host applications."""
        return {
            "eval_depth": self.depth,
            "n_nodes": self.node_count,
            "continuations": [c.to_dict() for c in self.continuations],
            "outcome": self.outcome.value if self.outcome is not None else None,
        }
