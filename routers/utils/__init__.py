"""
Utils layer
工具函数层
"""

from .validators import validate_game_log_input, GAME_LOG_MODES, TEXT_FIELD_LIMITS
from .team_display import (
    get_team_abbreviation,
    generate_boxscore_url,
    get_boxscore_url,
    get_status_tag,
    get_rooted_for_display
)

__all__ = [
    "validate_game_log_input",
    "GAME_LOG_MODES",
    "TEXT_FIELD_LIMITS",
    "get_team_abbreviation",
    "generate_boxscore_url",
    "get_boxscore_url",
    "get_status_tag",
    "get_rooted_for_display",
]
