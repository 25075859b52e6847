"""
Accumulates parsed analysis lines for the position under evaluation and
reduces them to a ranked evaluation.
"""

import logging
from typing import Dict, Iterable, List, Optional

import chess

from chess_eval.evaluation.types import Continuation, Evaluation, GameOutcome
from chess_eval.protocol.parser import InfoRecord, parse_info_line

logger = logging.getLogger(__name__)


class EvaluationAccumulator:
    """
    Append-only collection of InfoRecords for one analysis cycle.

    The engine keeps re-reporting lines as it deepens, so only records at the
    deepest depth seen are used, and for each rank the latest one wins.
    """

    def __init__(self):
        self.records: List[InfoRecord] = []

    def __len__(self) -> int:
        return len(self.records)

    def clear(self):
        self.records.clear()

    def add_record(self, record: InfoRecord):
        self.records.append(record)

    def process_line(self, line: str):
        record = parse_info_line(line)
        if record is not None:
            self.records.append(record)

    def process_lines(self, lines: Iterable[str]):
        for line in lines:
            self.process_line(line)

    def derive_evaluation(
        self,
        turn: chess.Color,
        outcome: Optional[GameOutcome] = None,
    ) -> Optional[Evaluation]:
        """
        Derive a summary evaluation from the records accumulated so far.

        Args:
            turn: Side to move in the analysed position, used to make
                scores absolute
            outcome: Game outcome to attach, if any

        Returns:
            Evaluation at the deepest depth seen, or None if nothing has
            been accumulated yet
        """
        if not self.records:
            return None

        depth = max(record.depth for record in self.records)

        by_rank: Dict[int, InfoRecord] = {}
        node_count = 0
        for record in self.records:
            if record.depth == depth:
                by_rank[record.rank] = record
                node_count = record.node_count

        ranks = sorted(by_rank)
        if ranks != list(range(1, len(ranks) + 1)):
            logger.debug(f"Non-contiguous multipv ranks at depth {depth}: {ranks}")

        continuations = [
            Continuation(
                moves=list(by_rank[rank].continuation),
                score=by_rank[rank].score.make_absolute(turn),
                rank=rank,
            )
            for rank in ranks
        ]

        return Evaluation(
            depth=depth,
            node_count=node_count,
            continuations=continuations,
            outcome=outcome,
        )
