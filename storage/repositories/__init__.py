"""
Storage repositories package.
"""
# 项目内部导包
from .base import BaseRepository
from .game_repository import GameRepository, build_game_conditions
from .game_log_repository import GameLogRepository

__all__ = [
    "BaseRepository",
    "GameRepository",
    "GameLogRepository",
    "build_game_conditions",
]
