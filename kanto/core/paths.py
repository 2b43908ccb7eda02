"""
Centralized path helpers (flat layout).
"""
from __future__ import annotations
from pathlib import Path

# This file lives at kanto/core/paths.py
ROOT = Path(__file__).resolve().parents[2]   # project root (one up from 'kanto')
ASSETS = ROOT / "assets"
POKEMON = ASSETS / "pokemon"
SPECIES = POKEMON / "species"
MOVES = ASSETS / "moves"
ITEMS = ASSETS / "items"
TRAINERS = ASSETS / "trainers"
REPORTS = ROOT / "scripts" / "reports"
