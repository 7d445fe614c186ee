"""
GameRepository - 比赛目录Repository
"""
# 标准库导包
from datetime import date
from typing import Optional, List

# 第三方库导包
from sqlalchemy import select, and_, or_, func
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from storage.models.game import Game
from storage.repositories.base import BaseRepository


def build_game_conditions(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    league: Optional[str] = None,
    season: Optional[int] = None,
    playoff: Optional[bool] = None,
    search: Optional[str] = None
) -> List:
    """
    构建比赛过滤条件，日记页和比赛列表页共用

    Args:
        start_date: 开始日期（含）
        end_date: 结束日期（含）
        league: 联盟
        season: 赛季
        playoff: 是否季后赛
        search: 关键字，匹配主队、客队或球场

    Returns:
        条件列表
    """
    conditions = []

    if start_date:
        conditions.append(Game.date >= start_date)
    if end_date:
        conditions.append(Game.date <= end_date)
    if league:
        conditions.append(Game.league == league)
    if season:
        conditions.append(Game.season == season)
    if playoff is not None:
        conditions.append(Game.playoff == playoff)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        conditions.append(or_(
            Game.home_team.ilike(pattern),
            Game.away_team.ilike(pattern),
            Game.venue.ilike(pattern)
        ))

    return conditions


class GameRepository(BaseRepository[Game]):
    """比赛目录Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Game)

    async def search_games(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        **filters
    ) -> List[Game]:
        """
        按条件查询比赛目录

        Args:
            limit: 限制返回数量
            offset: 偏移量
            **filters: 见build_game_conditions

        Returns:
            比赛列表（按日期倒序）
        """
        conditions = build_game_conditions(**filters)
        query = select(Game)

        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(Game.date.desc(), Game.game_id.asc())

        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_games(self, **filters) -> int:
        """
        统计符合条件的比赛数量

        Args:
            **filters: 见build_game_conditions

        Returns:
            比赛数量
        """
        conditions = build_game_conditions(**filters)
        query = select(func.count(Game.game_id))

        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return result.scalar_one()

    async def exists(self, game_id: str) -> bool:
        """检查比赛是否存在"""
        return await self.count(game_id=game_id) > 0

    async def upsert_game(self, game_id: str, **fields) -> bool:
        """
        导入比赛，已存在时更新比分等字段

        Args:
            game_id: 比赛ID
            **fields: 其余比赛字段

        Returns:
            新建返回True，更新返回False
        """
        existing = await self.get_by_id(game_id)
        if existing is None:
            await self.create(game_id=game_id, **fields)
            return True

        for key, value in fields.items():
            setattr(existing, key, value)
        await self.session.flush()
        return False
