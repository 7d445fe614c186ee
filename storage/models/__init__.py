"""
Storage models package.
"""
# 项目内部导包
from .game import Game
from .game_log import GameLog

__all__ = [
    "Game",
    "GameLog",
]
