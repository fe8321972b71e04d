"""
Main CLI for the Tablut engine.
"""

import argparse
import logging
import random
import sys
from collections import Counter
from typing import List, Optional

from tqdm import tqdm

from ..core import ATTACKER, DEFENDER, Board
from ..game import AIPlayer, Game, ManualPlayer
from ..solver import AlphaBetaSearcher, MinimaxSearcher, SearchConfig
from ..utils.rich_display import GameDisplay, console, render_board, setup_rich_logging


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _search_config(args) -> SearchConfig:
    return SearchConfig(fixed_depth=args.depth)


def _make_player(kind: str, side, config: SearchConfig):
    if kind == "manual":
        return ManualPlayer(side)
    return AIPlayer(side, config)


def play_command(args):
    """Play one game on the terminal."""
    setup_rich_logging(args.log_level)

    config = _search_config(args)
    display = GameDisplay()
    display.show_header("Tablut", args.black, args.white, args.limit)

    game = Game(
        attacker=_make_player(args.black, ATTACKER, config),
        defender=_make_player(args.white, DEFENDER, config),
        move_limit=args.limit,
        on_move=display.on_move,
    )
    display.show_board(game.board)
    result = game.play()
    display.show_result(result)


def analyze_command(args):
    """Search a single position and report the best move."""
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        board = Board.from_encoded(args.position)
    except ValueError as e:
        logger.error(f"Bad position: {e}")
        sys.exit(2)

    searcher_cls = MinimaxSearcher if args.exhaustive else AlphaBetaSearcher
    searcher = searcher_cls(board.turn, _search_config(args))
    result = searcher.search(board)

    console.print(render_board(board))
    if result.move is None:
        logger.info(f"No move available (value {result.value})")
    else:
        logger.info(f"Best move: {result.move}")
        logger.info(f"Value: {result.value} (depth {result.depth}, {result.nodes:,} nodes)")


def selfplay_command(args):
    """Play AI-vs-AI games and summarise the results."""
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    config = _search_config(args)
    rng = random.Random(args.seed)
    wins: Counter = Counter()
    reasons: Counter = Counter()
    lengths: List[int] = []

    logger.info(f"Playing {args.games} games ({args.opening_moves} random opening moves)")
    for _ in tqdm(range(args.games), desc="Self-play", unit=" game"):
        board = Board()
        # Random openings give the deterministic search different games
        for _ in range(args.opening_moves):
            moves = board.legal_moves(board.turn)
            if board.winner is not None or not moves:
                break
            board.make_move(rng.choice(moves))
        board.clear_undo()

        game = Game(
            attacker=AIPlayer(ATTACKER, config),
            defender=AIPlayer(DEFENDER, config),
            move_limit=args.limit,
            board=board,
        )
        result = game.play()
        wins[result.winner] += 1
        reasons[result.reason] += 1
        lengths.append(len(result.moves))

    GameDisplay().show_results(wins, reasons, lengths)


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Tablut engine")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game")
    play_parser.add_argument(
        "--black", choices=["manual", "ai"], default="ai", help="Attacking side"
    )
    play_parser.add_argument(
        "--white", choices=["manual", "ai"], default="manual", help="Defending side"
    )
    play_parser.add_argument(
        "--limit", type=int, default=0, help="Moves per side before forfeit (0 = unlimited)"
    )
    play_parser.add_argument(
        "--depth", type=int, default=None, help="Fixed search depth (default: by piece count)"
    )
    play_parser.set_defaults(func=play_command)

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Find the best move in a position")
    analyze_parser.add_argument(
        "position", help="Encoded board: side to move followed by 81 squares"
    )
    analyze_parser.add_argument(
        "--depth", type=int, default=None, help="Fixed search depth (default: by piece count)"
    )
    analyze_parser.add_argument(
        "--exhaustive", action="store_true", help="Plain minimax without pruning"
    )
    analyze_parser.set_defaults(func=analyze_command)

    # Self-play command
    selfplay_parser = subparsers.add_parser("selfplay", help="Play AI-vs-AI games")
    selfplay_parser.add_argument("--games", type=int, default=10)
    selfplay_parser.add_argument(
        "--limit", type=int, default=100, help="Moves per side before forfeit"
    )
    selfplay_parser.add_argument(
        "--depth", type=int, default=1, help="Fixed search depth"
    )
    selfplay_parser.add_argument(
        "--opening-moves", type=int, default=2, help="Random moves played before the AIs take over"
    )
    selfplay_parser.add_argument("--seed", type=int, default=0)
    selfplay_parser.set_defaults(func=selfplay_command)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
