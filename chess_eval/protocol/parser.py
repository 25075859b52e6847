"""
UCI Info Line Parser

Converts one line of engine output into an InfoRecord. A search produces a
steady stream of lines such as:

    info depth 7 seldepth 9 multipv 1 score cp 16 nodes 560 nps 186666
        hashfull 0 tbhits 0 time 3 pv d2d4 g8f6 c2c4 e7e6 g2g3

Recognized tokens (any order):
    depth <int>          search depth in plies
    multipv <int>        1-based rank of the line (defaults to 1)
    score cp <int>       centipawns, relative to the side to move
    score mate <int>     forced mate in N moves, relative to the side to move
    nodes <int>          nodes searched
    pv <move> ...        principal variation, runs to the end of the line
    string <text>        free text, runs to the end of the line (ignored)

Anything else is skipped. Lines without a score, and lines with a malformed
number, are not analysis data and yield None.

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from dataclasses import dataclass
from typing import List, Optional

from chess_eval.evaluation.types import EvaluationScore, ForcedMate, MaterialAdvantage


@dataclass(frozen=True)
class InfoRecord:
    """
    One parsed analysis line.

    Attributes:
        depth: Search depth the line was produced at
        continuation: Principal variation in UCI notation
        score: Score relative to the side to move
        node_count: Nodes searched so far
        rank: 1-based multipv rank (1 = best line)
    """
    depth: int
    continuation: List[str]
    score: EvaluationScore
    node_count: int
    rank: int


def _parse_int(token: Optional[str], minimum: Optional[int] = None) -> Optional[int]:
    if token is None:
        return None
    try:
        value = int(token)
    except ValueError:
        return None
    if minimum is not None and value < minimum:
        return None
    return value


def parse_info_line(line: str) -> Optional[InfoRecord]:
    """
    Parse a single line of engine output.

    Args:
        line: Raw line, with or without trailing newline

    Returns:
        InfoRecord, or None if the line carries no usable analysis
    """
    tokens = line.split()
    if not tokens or tokens[0] != "info":
        return None

    def token_at(index: int) -> Optional[str]:
        return tokens[index] if index < len(tokens) else None

    depth: Optional[int] = 0
    rank: Optional[int] = 1
    node_count: Optional[int] = 0
    score: Optional[EvaluationScore] = None
    continuation: List[str] = []

    i = 1
    while i < len(tokens):
        token = tokens[i]

        if token == "depth":
            depth = _parse_int(token_at(i + 1), minimum=0)
            if depth is None:
                return None
            i += 2
        elif token == "multipv":
            rank = _parse_int(token_at(i + 1), minimum=1)
            if rank is None:
                return None
            i += 2
        elif token == "nodes":
            node_count = _parse_int(token_at(i + 1), minimum=0)
            if node_count is None:
                return None
            i += 2
        elif token == "score":
            kind = token_at(i + 1)
            value = _parse_int(token_at(i + 2))
            if value is None:
                return None
            if kind == "cp":
                score = MaterialAdvantage(value)
            elif kind == "mate":
                score = ForcedMate(value)
            else:
                return None
            i += 3
        elif token == "pv":
            continuation = tokens[i + 1:]
            break
        elif token == "string":
            break
        else:
            i += 1

    if score is None:
        return None

    return InfoRecord(
        depth=depth,
        continuation=list(continuation),
        score=score,
        node_count=node_count,
        rank=rank,
    )
