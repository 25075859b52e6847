"""
Engine Module

Process management for an external UCI engine.

Key Components:
    - ProcessBridge: subprocess pipes behind reader/writer threads and queues
    - EngineSupervisor: IDLE/BUSY/FAILED state machine over one engine
    - parse_position: FEN validation
"""

from chess_eval.engine.bridge import ProcessBridge
from chess_eval.engine.supervisor import (
    EngineState,
    EngineSupervisor,
    game_outcome,
    parse_position,
)

__all__ = [
    'EngineState',
    'EngineSupervisor',
    'ProcessBridge',
    'game_outcome',
    'parse_position',
]
