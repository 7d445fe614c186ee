"""
欢迎弹窗路由
首次访问时展示一次欢迎信息
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends

# 项目内部导包
from models import UserInfo, WelcomeData, WelcomeResponse
from redis_client import has_seen_welcome, mark_welcome_seen
from utils import get_current_user_optional

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/welcome",
    tags=["欢迎弹窗"]
)


@router.get("", response_model=WelcomeResponse, summary="获取欢迎弹窗")
async def get_welcome(
    user_info: Optional[UserInfo] = Depends(get_current_user_optional)
):
    """
    获取欢迎弹窗内容

    show表示是否需要弹出，未登录用户总是弹出
    """
    try:
        show = True
        if user_info:
            show = not await has_seen_welcome(user_info.user_id)

        return WelcomeResponse(
            success=True,
            message="获取成功",
            data=WelcomeData(show=show)
        )

    except Exception as e:
        logger.error(f"获取欢迎弹窗失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"获取欢迎弹窗失败: {str(e)}")


@router.post("/dismiss", response_model=WelcomeResponse, summary="关闭欢迎弹窗")
async def dismiss_welcome(
    user_info: Optional[UserInfo] = Depends(get_current_user_optional)
):
    """
    关闭欢迎弹窗，之后不再弹出
    """
    if not user_info:
        raise HTTPException(status_code=401, detail="Must be authenticated to dismiss the welcome dialog")

    try:
        await mark_welcome_seen(user_info.user_id)

        return WelcomeResponse(
            success=True,
            message="已关闭",
            data=WelcomeData(show=False)
        )

    except Exception as e:
        logger.error(f"关闭欢迎弹窗失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"关闭欢迎弹窗失败: {str(e)}")
