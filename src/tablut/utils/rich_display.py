"""
Rich-based terminal display.

Provides:
- Coloured board diagrams
- Game headers and result tables
- Logging through a RichHandler
"""

import logging
from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core import ATTACKER, DEFENDER, EMPTY, KING, SIZE, THRONE, Board, Move, Piece, sq
from ..core.piece import SIDE_NAMES
from ..core.square import FILES
from ..game import GameResult

console = Console()

PIECE_STYLES = {
    ATTACKER: "bold red",
    DEFENDER: "bold white",
    KING: "bold yellow",
    EMPTY: "dim",
}


def render_board(board: Board, last_move: Optional[Move] = None) -> Text:
    """
    Coloured text diagram of `board`, rank 9 at the top.

    The squares of `last_move` are underlined and the empty throne is
    marked with '+'.
    """
    marked = set()
    if last_move is not None:
        marked = {last_move.from_sq, last_move.to_sq}

    text = Text()
    for row in range(SIZE - 1, -1, -1):
        text.append(f"{row + 1:>2} ", style="cyan")
        for col in range(SIZE):
            square = sq(col, row)
            piece = board.get(square)
            char = "+" if square == THRONE and piece is EMPTY else piece.char
            style = PIECE_STYLES[piece]
            if square in marked:
                style += " underline"
            text.append(char, style=style)
            text.append(" ")
        text.append("\n")
    text.append("   " + " ".join(FILES), style="cyan")
    return text


class GameDisplay:
    """
    Rich display for games played from the command line.

    Shows:
    - Board after every move
    - Side to move / winner
    - Self-play statistics
    """

    def __init__(self, show_boards: bool = True):
        self.show_boards = show_boards

    def show_header(self, title: str, attacker: str, defender: str, move_limit: int):
        """Show game header."""
        console.rule(f"[bold blue]{title}[/bold blue]")
        console.print(f"Black (attackers): {attacker}")
        console.print(f"White (defenders): {defender}")
        if move_limit:
            console.print(f"Move limit: {move_limit} per side")
        console.print()

    def show_board(self, board: Board, last_move: Optional[Move] = None):
        """Print the board followed by the side to move."""
        if not self.show_boards:
            return
        if last_move is not None:
            console.print(f"[dim]{SIDE_NAMES[board.turn.opponent()]} played[/dim] {last_move}")
        console.print(render_board(board, last_move))
        if board.winner is None:
            console.print(f"[dim]{SIDE_NAMES[board.turn]} to move[/dim]")
        console.print()

    def on_move(self, board: Board, move: Move):
        """Game callback: redraw after each move."""
        self.show_board(board, move)

    def show_result(self, result: GameResult):
        """Announce the winner and how the game ended."""
        style = PIECE_STYLES[result.winner]
        console.print(f"[{style}]{result}[/{style}] [dim]{len(result.moves)} moves played[/dim]")

    def results_table(self, wins: Dict[Piece, int], reasons: Dict[str, int], lengths: List[int]) -> Table:
        """Create self-play summary table."""
        table = Table(title="Self-play results", show_header=False, box=None, padding=(0, 1))
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")

        games = sum(wins.values())
        for side in (ATTACKER, DEFENDER):
            percent = (wins.get(side, 0) / games * 100) if games > 0 else 0
            table.add_row(
                f"{SIDE_NAMES[side].capitalize()} wins",
                f"{wins.get(side, 0)} ({percent:.0f}%)",
            )
        for reason, count in sorted(reasons.items()):
            table.add_row(f"  {reason}", str(count))
        if lengths:
            table.add_row("Average length", f"{sum(lengths) / len(lengths):.1f} moves")
        return table

    def show_results(self, wins: Dict[Piece, int], reasons: Dict[str, int], lengths: List[int]):
        console.print(self.results_table(wins, reasons, lengths))


def setup_rich_logging(level: str = "INFO"):
    """Configure logging to work nicely with rich console."""
    from rich.logging import RichHandler

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Add rich handler
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[rich_handler],
        format="%(message)s",
    )
