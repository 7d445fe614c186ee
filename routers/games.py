"""
比赛目录路由
"""
# 标准库导包
import logging
from datetime import date
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from models import GameFilters, GameListResponse, GameResponse
from storage.database import get_session
from storage.repositories.game_repository import GameRepository

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/games",
    tags=["比赛目录"]
)


@router.get("", response_model=GameListResponse, summary="浏览比赛")
async def list_games(
    start_date: Optional[date] = Query(None, description="开始日期，格式：YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="结束日期，格式：YYYY-MM-DD"),
    league: Optional[str] = Query(None, description="联盟"),
    season: Optional[int] = Query(None, description="赛季"),
    playoff: Optional[bool] = Query(None, description="是否季后赛"),
    search: Optional[str] = Query(None, description="关键字：球队或球场"),
    limit: int = Query(50, ge=1, le=200, description="每页数量"),
    offset: int = Query(0, ge=0, description="偏移量"),
    session: AsyncSession = Depends(get_session)
):
    """
    按条件浏览比赛目录，按日期倒序

    total为符合条件的比赛总数，不受分页影响
    """
    try:
        filters = GameFilters(
            start_date=start_date,
            end_date=end_date,
            league=league,
            season=season,
            playoff=playoff,
            search=search
        ).model_dump()

        game_repo = GameRepository(session)
        games = await game_repo.search_games(limit=limit, offset=offset, **filters)
        total = await game_repo.count_games(**filters)

        return GameListResponse(
            success=True,
            message="获取成功",
            data=[GameResponse.model_validate(game) for game in games],
            total=total
        )

    except Exception as e:
        logger.error(f"浏览比赛失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"浏览比赛失败: {str(e)}")
