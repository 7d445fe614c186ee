"""
认证工具
会话由上游网关负责，这里只从Header中读取用户标识
"""
# 标准库导包
from typing import Optional

# 第三方库导包
from fastapi import Header

# 项目内部导包
from models import UserInfo


async def get_current_user_optional(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id")
) -> Optional[UserInfo]:
    """
    获取当前用户

    没有X-User-Id时返回None，由业务层决定是返回空数据还是拒绝请求

    Args:
        x_user_id: X-User-Id header值

    Returns:
        UserInfo对象或None
    """
    if x_user_id and x_user_id.strip():
        return UserInfo(user_id=x_user_id.strip())
    return None


def get_user_id(user_info: Optional[UserInfo]) -> Optional[str]:
    """取出用户ID，未登录返回None"""
    return user_info.user_id if user_info else None
