"""Global type metadata: colors & abbreviations.

Provides:
  TYPE_COLORS_HEX: mapping type -> hex color string (#RRGGBB)
  TYPE_ABBREVIATIONS: mapping type -> 3-letter abbreviation (upper)
  STATUS_ABBREVIATIONS / STATUS_COLORS_HEX for the primary status badges
  helpers producing rich markup for the battle panel.
"""
from __future__ import annotations
from typing import Dict, Iterable

TYPE_COLORS_HEX: Dict[str, str] = {
    "normal": "#A8A77A",
    "fire": "#EE8130",
    "water": "#6390F0",
    "electric": "#F7D02C",
    "grass": "#7AC74C",
    "ice": "#96D9D6",
    "fighting": "#C22E28",
    "poison": "#A33EA1",
    "ground": "#E2BF65",
    "flying": "#A98FF3",
    "psychic": "#F95587",
    "bug": "#A6B91A",
    "rock": "#B6A136",
    "ghost": "#735797",
    "dragon": "#6F35FC",
    "dark": "#705746",
    "steel": "#B7B7CE",
    "fairy": "#D685AD",
}

TYPE_ABBREVIATIONS: Dict[str, str] = {
    "normal": "NRM",
    "fire": "FIR",
    "water": "WTR",
    "grass": "GRS",
    "electric": "ELE",
    "ice": "ICE",
    "fighting": "FGT",
    "poison": "PSN",
    "ground": "GRN",
    "flying": "FLY",
    "psychic": "PSY",
    "bug": "BUG",
    "rock": "RCK",
    "ghost": "GHO",
    "dragon": "DRA",
    "dark": "DRK",
    "steel": "STL",
    "fairy": "FAI",
}

STATUS_ABBREVIATIONS: Dict[str, str] = {
    "psn": "PSN",
    "tox": "TOX",
    "brn": "BRN",
    "par": "PAR",
    "slp": "SLP",
    "frz": "FRZ",
}

STATUS_COLORS_HEX: Dict[str, str] = {
    "psn": "#A33EA1",
    "tox": "#6B1E69",
    "brn": "#EE8130",
    "par": "#F7D02C",
    "slp": "#8C8C8C",
    "frz": "#96D9D6",
}


def type_abbreviation(type_name: str) -> str:
    return TYPE_ABBREVIATIONS.get(type_name.lower(), type_name[:3].upper())


def type_markup(type_name: str) -> str:
    """Rich markup tag for a single type, e.g. ``[#EE8130]FIR[/]``."""
    color = TYPE_COLORS_HEX.get(type_name.lower())
    abbr = type_abbreviation(type_name)
    if not color:
        return abbr
    return f"[bold {color}]{abbr}[/]"


def format_types(types: Iterable[str]) -> str:
    return "/".join(type_markup(t) for t in types)


def status_markup(code: str | None) -> str:
    if not code:
        return ""
    color = STATUS_COLORS_HEX.get(code, "#FFFFFF")
    return f"[bold {color}]{STATUS_ABBREVIATIONS.get(code, code.upper())}[/]"

__all__ = [
    "TYPE_COLORS_HEX","TYPE_ABBREVIATIONS","STATUS_ABBREVIATIONS","STATUS_COLORS_HEX",
    "type_abbreviation","type_markup","format_types","status_markup",
]
