"""
UCI Output Processing

Parsing of engine "info" lines and their reduction into a ranked evaluation.

Protocol Flow (as seen by the supervisor):
    Supervisor → "position fen <FEN>"
    Supervisor → "go"
    Engine → "info depth 1 multipv 1 score cp 20 nodes 20 pv e2e4"
    Engine → "info depth 2 multipv 1 score cp 16 nodes 76 pv d2d4 d7d5"
    ...
    Supervisor → "stop"
    Supervisor → "isready"
    Engine → "bestmove d2d4"
    Engine → "readyok"

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from chess_eval.protocol.accumulator import EvaluationAccumulator
from chess_eval.protocol.parser import InfoRecord, parse_info_line

__all__ = ['EvaluationAccumulator', 'InfoRecord', 'parse_info_line']
