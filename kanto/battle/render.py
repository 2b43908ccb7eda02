"""Rich rendering of a battle snapshot.

Two HUD panels (opponent / player) side by side and a message panel holding
the last few log lines. Nothing here mutates the snapshot, so the CLI can
redraw after every turn.
"""
from __future__ import annotations
from typing import Optional

from rich.align import Align
from rich.box import ROUNDED
from rich.columns import Columns
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import BattleSnapshot, Combatant
from kanto.core.types import format_types, status_markup

console = Console()

HP_BAR_WIDTH = 20


def hp_bar(current: int, max_hp: int, width: int = HP_BAR_WIDTH) -> str:
    """HP bar markup; green above half, yellow above a quarter, red below."""
    if max_hp <= 0 or current <= 0:
        return "[red]FAINTED[/red]"
    pct = current / max_hp
    filled = max(1, int(pct * width))
    if pct > 0.5:
        color = "green"
    elif pct > 0.25:
        color = "yellow"
    else:
        color = "red"
    return f"[{color}]{'█' * filled}[/{color}]{'░' * (width - filled)}"


def combatant_panel(c: Combatant, title: str) -> Panel:
    header = f"{c.name} Lv{c.level}"
    badge = status_markup(c.status_code)
    if badge:
        header += f" {badge}"
    body = (
        f"[bold bright_white]{header}[/bold bright_white]\n"
        f"Type: {format_types(c.types)}\n"
        f"HP: {c.current_hp}/{c.max_hp}\n"
        f"{hp_bar(c.current_hp, c.max_hp)}"
    )
    return Panel(body, title=f"[bold]{title}[/bold]", box=ROUNDED, width=40, padding=(0, 1))


def moves_table(c: Combatant) -> Table:
    table = Table(box=ROUNDED, show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Move")
    table.add_column("Type")
    table.add_column("PP", justify="right")
    for i, slot in enumerate(c.moves):
        style = None if slot.pp > 0 else "dim"
        table.add_row(str(i + 1), slot.move.name, format_types([slot.move.type]),
                      f"{slot.pp}/{slot.move.max_pp}", style=style)
    return table


def render_battle(snapshot: BattleSnapshot, window: int = 6, *, show_moves: bool = False) -> Group:
    opp_title = snapshot.trainer_name or ("WILD" if not snapshot.kind.is_trainer else "OPPONENT")
    hud = Columns([combatant_panel(snapshot.opponent, opp_title),
                   combatant_panel(snapshot.player, "YOUR POKEMON")], padding=(0, 2))
    lines = snapshot.recent(window) or ("...",)
    log = Panel(Text("\n".join(lines)), title=f"Turn {snapshot.turn}", box=ROUNDED, padding=(0, 1))
    parts = [Align.center(hud), log]
    if show_moves:
        parts.append(moves_table(snapshot.player))
    return Group(*parts)


def print_battle(snapshot: BattleSnapshot, window: int = 6, *, target: Optional[Console] = None, show_moves: bool = False):
    (target or console).print(render_battle(snapshot, window, show_moves=show_moves))

__all__ = ["render_battle","print_battle","combatant_panel","moves_table","hp_bar","console"]
