"""
日记时间线路由
提供记录过的比赛列表和时间线卡片API接口
"""
# 标准库导包
import logging
from datetime import date
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from exceptions import GameLogError
from models import (
    UserInfo,
    LoggedGamesFilters,
    LoggedGameListResponse,
    TimelineResponse
)
from query_cache import QueryCache, get_query_cache
from storage.database import get_session
from routers.services.game_log_service import GameLogService
from routers.services.diary_service import DiaryService
from utils import get_current_user_optional, get_user_id

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/diary",
    tags=["日记时间线"]
)


def get_logged_games_filters(
    start_date: Optional[date] = Query(None, description="开始日期，格式：YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="结束日期，格式：YYYY-MM-DD"),
    league: Optional[str] = Query(None, description="联盟"),
    season: Optional[int] = Query(None, description="赛季"),
    playoff: Optional[bool] = Query(None, description="是否季后赛"),
    search: Optional[str] = Query(None, description="关键字：球队或球场"),
    mode: Optional[str] = Query(None, description="观赛方式：attended/watched")
) -> LoggedGamesFilters:
    """从查询参数构建过滤条件"""
    return LoggedGamesFilters(
        start_date=start_date,
        end_date=end_date,
        league=league,
        season=season,
        playoff=playoff,
        search=search,
        mode=mode
    )


@router.get("/logged-games", response_model=LoggedGameListResponse, summary="获取记录过的比赛")
async def list_logged_games(
    filters: LoggedGamesFilters = Depends(get_logged_games_filters),
    user_info: Optional[UserInfo] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_session),
    cache: QueryCache = Depends(get_query_cache)
):
    """
    获取当前用户记录过的比赛，每项附带对应的日记

    未登录时返回空列表
    """
    try:
        game_log_service = GameLogService(session, cache)
        logged_games = await game_log_service.list_logged_games(get_user_id(user_info), filters)

        return LoggedGameListResponse(
            success=True,
            message="获取成功",
            data=logged_games,
            total=len(logged_games)
        )

    except GameLogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"获取记录过的比赛失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"获取记录过的比赛失败: {str(e)}")


@router.get("/timeline", response_model=TimelineResponse, summary="获取日记时间线")
async def get_timeline(
    filters: LoggedGamesFilters = Depends(get_logged_games_filters),
    user_info: Optional[UserInfo] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_session),
    cache: QueryCache = Depends(get_query_cache)
):
    """
    获取日记页的卡片数据

    包含比赛信息、观赛方式、评分、支持球队胜负、同行人、备注和技术统计链接
    """
    try:
        diary_service = DiaryService(GameLogService(session, cache))
        timeline = await diary_service.build_timeline(get_user_id(user_info), filters)

        return TimelineResponse(
            success=True,
            message="获取成功",
            data=timeline
        )

    except GameLogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"获取日记时间线失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"获取日记时间线失败: {str(e)}")
