"""
观赛日记路由
提供日记的查询、创建、更新、删除API接口
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from exceptions import GameLogError
from models import (
    UserInfo,
    CreateGameLogRequest,
    UpdateGameLogRequest,
    GameLogListResponse,
    GameLogDetailResponse,
    DeleteGameLogResponse
)
from query_cache import QueryCache, get_query_cache
from storage.database import get_session
from routers.services.game_log_service import GameLogService
from utils import get_current_user_optional, get_user_id

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/game-logs",
    tags=["观赛日记"]
)


@router.get("", response_model=GameLogListResponse, summary="获取日记列表")
async def list_game_logs(
    user_info: Optional[UserInfo] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_session),
    cache: QueryCache = Depends(get_query_cache)
):
    """
    获取当前用户的全部日记，按创建时间倒序

    未登录时返回空列表
    """
    try:
        game_log_service = GameLogService(session, cache)
        game_logs = await game_log_service.list_game_logs(get_user_id(user_info))

        return GameLogListResponse(
            success=True,
            message="获取成功",
            data=game_logs,
            total=len(game_logs)
        )

    except GameLogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"获取日记列表失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"获取日记列表失败: {str(e)}")


@router.post("", response_model=GameLogDetailResponse, status_code=201, summary="创建日记")
async def create_game_log(
    request: CreateGameLogRequest,
    user_info: Optional[UserInfo] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_session),
    cache: QueryCache = Depends(get_query_cache)
):
    """
    为一场比赛创建日记

    user_id始终取自当前会话
    """
    try:
        game_log_service = GameLogService(session, cache)
        game_log = await game_log_service.add_game_log(
            get_user_id(user_info),
            request.model_dump()
        )

        return GameLogDetailResponse(
            success=True,
            message="创建成功",
            data=game_log
        )

    except GameLogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"创建日记失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"创建日记失败: {str(e)}")


@router.put("/{game_log_id}", response_model=GameLogDetailResponse, summary="更新日记")
async def update_game_log(
    game_log_id: str,
    request: UpdateGameLogRequest,
    user_info: Optional[UserInfo] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_session),
    cache: QueryCache = Depends(get_query_cache)
):
    """
    更新日记的观赛方式、评分、支持球队、同行人和备注

    只能更新自己的日记
    """
    try:
        game_log_service = GameLogService(session, cache)
        game_log = await game_log_service.update_game_log(
            get_user_id(user_info),
            game_log_id,
            request.model_dump()
        )

        return GameLogDetailResponse(
            success=True,
            message="更新成功",
            data=game_log
        )

    except GameLogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"更新日记失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"更新日记失败: {str(e)}")


@router.delete("/{game_log_id}", response_model=DeleteGameLogResponse, summary="删除日记")
async def delete_game_log(
    game_log_id: str,
    user_info: Optional[UserInfo] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_session),
    cache: QueryCache = Depends(get_query_cache)
):
    """
    删除日记

    只能删除自己的日记
    """
    try:
        game_log_service = GameLogService(session, cache)
        deleted_id = await game_log_service.delete_game_log(get_user_id(user_info), game_log_id)

        return DeleteGameLogResponse(
            success=True,
            message="删除成功",
            data=deleted_id
        )

    except GameLogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"删除日记失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"删除日记失败: {str(e)}")
