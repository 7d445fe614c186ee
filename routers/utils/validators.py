"""
日记输入校验
"""
# 标准库导包
from typing import Dict, Any

# 项目内部导包
from exceptions import ValidationError


GAME_LOG_MODES = ("attended", "watched")

# 文本字段的最大长度
TEXT_FIELD_LIMITS = {
    "company": 255,
    "notes": 1000,
    "rooted_for": 100,
}

RATING_MIN = 1
RATING_MAX = 5


def _sanitize_text(value, max_length: int):
    """去掉首尾空白并截断，空值统一为None"""
    if value is None:
        return None
    text = str(value).strip()[:max_length]
    return text or None


def _normalize_rating(rating):
    if rating is None:
        return None
    # bool是int的子类，需要单独排除
    if isinstance(rating, bool):
        raise ValidationError("Rating must be an integer between 1 and 5")
    if isinstance(rating, float):
        if not rating.is_integer():
            raise ValidationError("Rating must be an integer between 1 and 5")
        rating = int(rating)
    if not isinstance(rating, int) or rating < RATING_MIN or rating > RATING_MAX:
        raise ValidationError("Rating must be an integer between 1 and 5")
    return rating


def validate_game_log_input(game_log: Dict[str, Any]) -> Dict[str, Any]:
    """
    校验并清洗日记输入

    创建和更新共用同一套规则，在访问存储之前执行。

    Args:
        game_log: 日记字段字典，需包含game_id和mode

    Returns:
        清洗后的副本：文本字段去空白并截断，空文本为None

    Raises:
        ValidationError: 缺少必填字段、mode非法或评分越界
    """
    if not game_log.get("game_id") or not game_log.get("mode"):
        raise ValidationError("Game ID and mode are required")

    if game_log["mode"] not in GAME_LOG_MODES:
        raise ValidationError('Invalid mode. Must be "attended" or "watched"')

    sanitized = dict(game_log)
    sanitized["rating"] = _normalize_rating(game_log.get("rating"))

    for field, max_length in TEXT_FIELD_LIMITS.items():
        sanitized[field] = _sanitize_text(game_log.get(field), max_length)

    return sanitized
