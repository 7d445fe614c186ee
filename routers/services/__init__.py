"""
Services layer
业务逻辑层
"""

from .game_log_service import GameLogService
from .diary_service import DiaryService
from .optimistic_update import OptimisticUpdate, OptimisticPhase

__all__ = [
    "GameLogService",
    "DiaryService",
    "OptimisticUpdate",
    "OptimisticPhase",
]
