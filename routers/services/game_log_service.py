"""
观赛日记服务类
处理日记的查询、创建、更新、删除，以及相关查询缓存的失效和乐观更新
"""
# 标准库导包
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

# 第三方库导包
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from exceptions import AuthenticationError, ValidationError, RemoteStoreError
from models import GameLogResponse, GameResponse, LoggedGameResponse, LoggedGamesFilters
from query_cache import QueryCache
from routers.services.optimistic_update import OptimisticUpdate
from routers.utils.validators import validate_game_log_input
from storage.repositories.game_log_repository import GameLogRepository
from storage.repositories.game_repository import GameRepository

# 配置日志
logger = logging.getLogger(__name__)

GAME_LOGS_KEY = "game-logs"
LOGGED_GAMES_KEY = "logged-games"

# 更新时允许修改的字段
MUTABLE_FIELDS = ("mode", "company", "rating", "rooted_for", "notes")


def game_log_to_dict(game_log) -> Dict[str, Any]:
    """将GameLog模型转换为可缓存的字典"""
    return GameLogResponse.model_validate(game_log).model_dump(mode="json")


def logged_game_to_dict(game, game_log) -> Dict[str, Any]:
    """将(比赛, 日记)转换为可缓存的字典"""
    game_data = GameResponse.model_validate(game).model_dump()
    return LoggedGameResponse(
        **game_data,
        log_data=GameLogResponse.model_validate(game_log)
    ).model_dump(mode="json")


class GameLogService:
    """观赛日记服务类"""

    def __init__(self, session: AsyncSession, cache: QueryCache):
        """
        初始化日记服务

        Args:
            session: 数据库会话
            cache: 查询缓存
        """
        self.session = session
        self.cache = cache
        self.game_log_repo = GameLogRepository(session)
        self.game_repo = GameRepository(session)

    @staticmethod
    def game_logs_key(user_id: str) -> list:
        return [GAME_LOGS_KEY, user_id]

    @staticmethod
    def logged_games_prefix(user_id: str) -> list:
        return [LOGGED_GAMES_KEY, user_id]

    @staticmethod
    def logged_games_key(user_id: str, filters: LoggedGamesFilters) -> list:
        return [LOGGED_GAMES_KEY, user_id, filters.model_dump_json()]

    async def _invalidate_user_queries(self, user_id: str):
        await self.cache.invalidate(self.game_logs_key(user_id))
        await self.cache.invalidate(self.logged_games_prefix(user_id))

    # ========== 查询 ==========

    async def list_game_logs(self, user_id: Optional[str]) -> List[Dict[str, Any]]:
        """
        获取当前用户的全部日记

        未登录时直接返回空列表，不访问存储和缓存

        Args:
            user_id: 当前用户ID

        Returns:
            日记列表（按创建时间倒序）
        """
        if not user_id:
            return []

        async def fetch_game_logs():
            game_logs = await self.game_log_repo.get_by_user_id(user_id)
            return [game_log_to_dict(game_log) for game_log in game_logs]

        return await self.cache.fetch(self.game_logs_key(user_id), fetch_game_logs)

    async def list_logged_games(
        self,
        user_id: Optional[str],
        filters: LoggedGamesFilters
    ) -> List[Dict[str, Any]]:
        """
        获取当前用户记录过的比赛

        Args:
            user_id: 当前用户ID
            filters: 过滤条件，原样用于缓存key和存储查询

        Returns:
            比赛列表，每项带log_data
        """
        if not user_id:
            return []

        async def fetch_logged_games():
            rows = await self.game_log_repo.get_logged_games(user_id, **filters.model_dump())
            return [logged_game_to_dict(game, game_log) for game, game_log in rows]

        return await self.cache.fetch(self.logged_games_key(user_id, filters), fetch_logged_games)

    # ========== 写入 ==========

    async def add_game_log(self, user_id: Optional[str], game_log: Dict[str, Any]) -> Dict[str, Any]:
        """
        创建日记

        Args:
            user_id: 当前用户ID，调用方传入的user_id字段会被忽略
            game_log: 日记字段

        Returns:
            新建的日记（含ID和时间戳）
        """
        if not user_id:
            raise AuthenticationError("Must be authenticated to add game logs")

        validated = validate_game_log_input(game_log)

        if not await self.game_repo.exists(validated["game_id"]):
            raise RemoteStoreError(f"Game not found: {validated['game_id']}", status_code=404)

        try:
            created = await self.game_log_repo.create(
                game_id=validated["game_id"],
                mode=validated["mode"],
                rating=validated["rating"],
                rooted_for=validated["rooted_for"],
                company=validated["company"],
                notes=validated["notes"],
                user_id=user_id
            )
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"创建日记冲突: user_id={user_id}, game_id={validated['game_id']}, error={str(e)}")
            raise RemoteStoreError("Game already logged", status_code=409) from e

        logger.info(f"创建日记成功: game_log_id={created.id}, user_id={user_id}, game_id={created.game_id}")

        await self._invalidate_user_queries(user_id)
        return game_log_to_dict(created)

    async def update_game_log(
        self,
        user_id: Optional[str],
        game_log_id: Optional[str],
        game_log: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        更新日记，只修改可变字段，不做乐观更新

        Args:
            user_id: 当前用户ID
            game_log_id: 日记ID
            game_log: 新的字段值

        Returns:
            更新后的日记
        """
        if not user_id:
            raise AuthenticationError("Must be authenticated to update game logs")

        if not game_log_id:
            raise ValidationError("Game log ID is required for updates")

        # game_id只是为了满足共用的校验规则，不会写入
        validated = validate_game_log_input({**game_log, "game_id": "temp"})
        fields = {field: validated[field] for field in MUTABLE_FIELDS}

        updated = await self.game_log_repo.update_owned(
            game_log_id,
            user_id,
            updated_at=datetime.utcnow(),
            **fields
        )

        if not updated:
            await self.session.rollback()
            logger.warning(f"更新日记未命中: game_log_id={game_log_id}, user_id={user_id}")
            raise RemoteStoreError("Game log not found", status_code=404)

        await self.session.commit()
        logger.info(f"更新日记成功: game_log_id={game_log_id}, user_id={user_id}")

        await self._invalidate_user_queries(user_id)
        return game_log_to_dict(updated)

    async def delete_game_log(self, user_id: Optional[str], game_log_id: Optional[str]) -> str:
        """
        删除日记

        存储删除前先从缓存中移除该日记，删除失败时恢复缓存，最后总是让缓存失效

        Args:
            user_id: 当前用户ID
            game_log_id: 日记ID

        Returns:
            被删除的日记ID
        """
        if not user_id:
            raise AuthenticationError("Must be authenticated to delete game logs")

        if not game_log_id:
            raise ValidationError("Game log ID is required for deletion")

        async def remote_delete():
            try:
                deleted = await self.game_log_repo.delete_owned(game_log_id, user_id)
                if not deleted:
                    raise RemoteStoreError("Game log not found", status_code=404)
                await self.session.commit()
            except Exception:
                await self.session.rollback()
                raise
            return game_log_id

        optimistic = OptimisticUpdate(self.cache, [
            (
                self.game_logs_key(user_id),
                lambda old: [log for log in (old or []) if log.get("id") != game_log_id]
            ),
            (
                # 不区分过滤条件，该用户所有已缓存的比赛列表都移除这条日记
                self.logged_games_prefix(user_id),
                lambda old: [
                    game for game in (old or [])
                    if (game.get("log_data") or {}).get("id") != game_log_id
                ]
            ),
        ])

        try:
            result = await optimistic.run(remote_delete)
        except Exception as e:
            logger.error(f"删除日记失败: game_log_id={game_log_id}, user_id={user_id}, error={str(e)}")
            raise

        logger.info(f"删除日记成功: game_log_id={game_log_id}, user_id={user_id}")
        return result
