#!/usr/bin/env python3
"""
CLI tool for evaluating a single position with a UCI engine.

Usage:
    python tools/evaluate_position.py \\
        --fen "r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3" \\
        --depth 20 \\
        --threads 4

    python tools/evaluate_position.py --depth 15 --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import chess
from tqdm import tqdm

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_eval.config import EngineConfig
from chess_eval.errors import EngineError
from chess_eval.evaluation.types import Evaluation
from chess_eval.log import setup_logging
from chess_eval.service import EvaluationService


def format_evaluation(evaluation: Evaluation) -> str:
    """Human-readable summary of an evaluation."""
    if evaluation.outcome is not None:
        return f"Game over: {evaluation.outcome.value}"

    lines = [f"Depth {evaluation.depth}, {evaluation.node_count:,} nodes"]
    for continuation in evaluation.continuations:
        score = continuation.score
        if score.is_forced_mate:
            score_str = f"#{score.value}"
        else:
            score_str = f"{score.value / 100:+.2f}"
        lines.append(f"  {continuation.rank}. {score_str:>7}  {' '.join(continuation.moves)}")
    return "\n".join(lines)


def evaluate(args) -> int:
    """Run one evaluation and print the result."""
    try:
        config = EngineConfig(
            engine_path=args.stockfish_path,
            threads=args.threads,
            auto_threads=args.threads is None,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    try:
        service = EvaluationService(config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1

    with service, tqdm(total=args.depth, desc="Depth", unit="ply", disable=args.json) as pbar:

        def on_update(evaluation: Evaluation):
            reached = min(evaluation.depth, args.depth)
            if reached > pbar.n:
                pbar.update(reached - pbar.n)

        try:
            evaluation = service.evaluate_to_depth(
                args.fen,
                args.depth,
                timeout=args.timeout,
                on_update=on_update,
            )
        except EngineError as e:
            pbar.close()
            print(f"Error: {e}")
            return 1

    if args.json:
        print(json.dumps(evaluation.to_dict(), indent=2))
    else:
        print(format_evaluation(evaluation))

    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Evaluate a chess position with a UCI engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--fen",
        type=str,
        default=chess.STARTING_FEN,
        help="Position to evaluate (default: starting position)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=20,
        help="Target search depth (default: 20)",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Engine search threads (default: one per CPU core)",
    )
    parser.add_argument(
        "--stockfish-path",
        type=str,
        default=None,
        help="Path to Stockfish binary (default: auto-detect)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up after this many seconds (default: no limit)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the evaluation as JSON",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (includes engine traffic)",
    )

    args = parser.parse_args()

    if args.depth <= 0:
        print(f"Error: --depth must be positive, got {args.depth}")
        sys.exit(1)

    logger = setup_logging(verbose=args.verbose, log_file=args.log_file)
    if args.json and not args.verbose:
        logger.setLevel(logging.WARNING)

    sys.exit(evaluate(args))


if __name__ == "__main__":
    main()
