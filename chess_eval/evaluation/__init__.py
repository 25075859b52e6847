"""
Evaluation Module

Value types produced by the supervisor: scores, ranked continuations, the
evaluation snapshot and game outcomes.
"""

from chess_eval.evaluation.types import (
    Continuation,
    Evaluation,
    EvaluationScore,
    ForcedMate,
    GameOutcome,
    MaterialAdvantage,
)

__all__ = [
    'Continuation',
    'Evaluation',
    'EvaluationScore',
    'ForcedMate',
    'GameOutcome',
    'MaterialAdvantage',
]
