"""
chess_eval

Live position evaluation backed by an external UCI engine (Stockfish).

## Architecture

The package is organized into several key modules:

1. **engine**: Engine process management
   - ProcessBridge: non-blocking line interface over the engine's pipes,
     served by a reader thread and a writer thread
   - EngineSupervisor: IDLE/BUSY/FAILED state machine with start/poll/stop

2. **protocol**: UCI output processing
   - parse_info_line: "info depth ... score ... pv ..." to InfoRecord
   - EvaluationAccumulator: deepest-depth, last-write-wins-per-rank reduction

3. **evaluation**: Result types
   - MaterialAdvantage / ForcedMate scores, always from White's perspective
   - Continuation, Evaluation, GameOutcome

4. **service**: Host boundary
   - EvaluationService: one lock around the supervisor, plus
     evaluate_to_depth for scripted use

## Quick Start

```python
from chess_eval import EngineConfig, EvaluationService

with EvaluationService(EngineConfig(threads=4)) as service:
    evaluation = service.evaluate_to_depth(
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1", depth=18
    )
    print(evaluation.best_move, evaluation.absolute_score())
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chess_eval.config import EngineConfig, find_stockfish
from chess_eval.engine import EngineState, EngineSupervisor, ProcessBridge
from chess_eval.errors import (
    EngineBusyError,
    EngineCrashedError,
    EngineError,
    EngineTimeoutError,
    EngineUnavailableError,
    InvalidInputError,
    NotEvaluatingError,
)
from chess_eval.evaluation import (
    Continuation,
    Evaluation,
    EvaluationScore,
    ForcedMate,
    GameOutcome,
    MaterialAdvantage,
)
from chess_eval.protocol import EvaluationAccumulator, InfoRecord, parse_info_line
from chess_eval.service import EvaluationService

__all__ = [
    'EngineConfig',
    'find_stockfish',
    'EngineState',
    'EngineSupervisor',
    'ProcessBridge',
    'EngineBusyError',
    'EngineCrashedError',
    'EngineError',
    'EngineTimeoutError',
    'EngineUnavailableError',
    'InvalidInputError',
    'NotEvaluatingError',
    'Continuation',
    'Evaluation',
    'EvaluationScore',
    'ForcedMate',
    'GameOutcome',
    'MaterialAdvantage',
    'EvaluationAccumulator',
    'InfoRecord',
    'parse_info_line',
    'EvaluationService',
]
