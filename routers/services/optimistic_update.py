"""
乐观更新

三阶段：快照并先行修改缓存 -> 执行存储写入 -> 无论成败都让缓存失效重新读取。
写入失败时把快照原样写回。
"""
# 标准库导包
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

# 项目内部导包
from query_cache import CacheKey, QueryCache

logger = logging.getLogger(__name__)


class OptimisticPhase(str, Enum):
    """乐观更新所处阶段"""
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    SETTLED = "settled"


class OptimisticUpdate:
    """
    一次乐观更新事务

    用法:
        update = OptimisticUpdate(cache, [(prefix, updater), ...])
        result = await update.run(remote_call)
    """

    def __init__(self, cache: QueryCache, patches: Sequence[Tuple[CacheKey, Callable[[Any], Any]]]):
        """
        Args:
            cache: 查询缓存
            patches: (key前缀, 修改函数)列表，前缀下所有已缓存数据都会被修改
        """
        self.cache = cache
        self.patches = list(patches)
        self.phase = OptimisticPhase.IDLE
        self.snapshots: Dict[str, Optional[str]] = {}

    @property
    def prefixes(self) -> List[CacheKey]:
        return [prefix for prefix, _ in self.patches]

    async def begin(self):
        """取消进行中的读取、做快照并先行修改缓存"""
        for prefix in self.prefixes:
            await self.cache.cancel_in_flight(prefix)

        for prefix in self.prefixes:
            self.snapshots.update(await self.cache.snapshot(prefix))

        self.phase = OptimisticPhase.PENDING

        for prefix, updater in self.patches:
            await self.cache.patch_under(prefix, updater)

    async def rollback(self):
        """把所有快照原样写回"""
        await self.cache.restore(self.snapshots)
        self.phase = OptimisticPhase.ROLLED_BACK
        logger.info(f"乐观更新已回滚，恢复缓存数量: {len(self.snapshots)}")

    async def settle(self):
        """让相关缓存全部失效，以存储中的数据为准"""
        for prefix in self.prefixes:
            await self.cache.invalidate(prefix)
        self.phase = OptimisticPhase.SETTLED

    async def run(self, remote_call: Callable[[], Awaitable[Any]]) -> Any:
        """
        执行完整的乐观更新流程

        Args:
            remote_call: 真正的存储写入

        Returns:
            remote_call的返回值
        """
        try:
            await self.begin()
            result = await remote_call()
            self.phase = OptimisticPhase.COMMITTED
            return result
        except Exception:
            if self.phase == OptimisticPhase.PENDING:
                await self.rollback()
            raise
        finally:
            await self.settle()
