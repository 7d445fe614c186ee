"""
GameLogRepository - 观赛日记Repository
"""
# 标准库导包
from typing import Optional, List, Tuple

# 第三方库导包
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from storage.models.game import Game
from storage.models.game_log import GameLog
from storage.repositories.base import BaseRepository
from storage.repositories.game_repository import build_game_conditions


class GameLogRepository(BaseRepository[GameLog]):
    """观赛日记Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, GameLog)

    async def get_by_user_id(
        self,
        user_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_desc: bool = True
    ) -> List[GameLog]:
        """
        根据用户ID获取日记列表

        Args:
            user_id: 用户ID
            limit: 限制返回数量
            offset: 偏移量
            order_desc: 是否降序排列（按创建时间）

        Returns:
            日记列表
        """
        return await self.query_by_filters(
            filters={"user_id": user_id},
            limit=limit,
            offset=offset,
            order_by="created_at",
            order_desc=order_desc
        )

    async def get_owned(self, game_log_id: str, user_id: str) -> Optional[GameLog]:
        """
        获取属于指定用户的日记

        Args:
            game_log_id: 日记ID
            user_id: 用户ID

        Returns:
            日记实例，不存在或不属于该用户时返回None
        """
        result = await self.session.execute(
            select(GameLog).where(
                and_(GameLog.id == game_log_id, GameLog.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def update_owned(self, game_log_id: str, user_id: str, **fields) -> Optional[GameLog]:
        """
        按(id, user_id)复合条件更新日记

        其他用户的日记不会命中任何行

        Args:
            game_log_id: 日记ID
            user_id: 用户ID
            **fields: 要更新的字段

        Returns:
            更新后的日记实例，未命中时返回None
        """
        rowcount = await self.update_where(
            {"id": game_log_id, "user_id": user_id},
            **fields
        )
        if rowcount == 0:
            return None

        updated = await self.get_owned(game_log_id, user_id)
        if updated:
            await self.session.refresh(updated)
        return updated

    async def delete_owned(self, game_log_id: str, user_id: str) -> bool:
        """
        按(id, user_id)复合条件删除日记

        Args:
            game_log_id: 日记ID
            user_id: 用户ID

        Returns:
            是否删除了记录
        """
        rowcount = await self.delete_where({"id": game_log_id, "user_id": user_id})
        return rowcount > 0

    async def get_logged_games(
        self,
        user_id: str,
        mode: Optional[str] = None,
        **filters
    ) -> List[Tuple[Game, GameLog]]:
        """
        获取用户记录过的比赛（比赛与日记联表）

        Args:
            user_id: 用户ID
            mode: 观赛方式过滤（attended/watched）
            **filters: 比赛过滤条件，见build_game_conditions

        Returns:
            (比赛, 日记)元组列表，按比赛日期倒序
        """
        conditions = [GameLog.user_id == user_id]
        conditions.extend(build_game_conditions(**filters))

        if mode:
            conditions.append(GameLog.mode == mode)

        query = (
            select(Game, GameLog)
            .join(GameLog, GameLog.game_id == Game.game_id)
            .where(and_(*conditions))
            .order_by(Game.date.desc(), GameLog.created_at.desc())
        )

        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]
