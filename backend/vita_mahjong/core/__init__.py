"""Core game logic package.

This package contains the board generation engines, the accessibility
evaluator and the game session state machine.
"""
from .generator import BoardGenerator, GeneratedBoard, get_generator, init_game
from .accessibility import is_playable, check_match, find_hint_pair, playable_tiles
from .game_engine import GameSession, ArrivalResult, ActionOutcome
from .session_store import SessionStore, get_session_store

__all__ = [
    "BoardGenerator",
    "GeneratedBoard",
    "get_generator",
    "init_game",
    "is_playable",
    "check_match",
    "find_hint_pair",
    "playable_tiles",
    "GameSession",
    "ArrivalResult",
    "ActionOutcome",
    "SessionStore",
    "get_session_store",
]
