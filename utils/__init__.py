"""
Utils layer
通用工具函数
"""

from .auth import get_current_user_optional, get_user_id

__all__ = ["get_current_user_optional", "get_user_id"]
