"""
Morris - Nine Men's Morris Rules Engine

A deterministic engine for two-player Nine Men's Morris (Cat vs Dog).
The engine provides:
- Board snapshots with a fixed 24-point graph
- Mill detection and capture protection
- Phase-gated actions (pick up, place, capture)
- Game history with undo, saved-game storage and an HTTP API
"""

__version__ = "0.1.0"
