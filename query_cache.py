"""
查询缓存

基于Redis的进程级查询缓存，按key前缀进行读取、失效、补丁、取消和快照操作。
key由若干段组成，例如 ["game-logs", user_id]、["logged-games", user_id, filters]，
前缀匹配按段进行，["game-logs", "u1"] 不会匹配到 ["game-logs", "u10"]。
"""
# 标准库导包
import asyncio
import json
import logging
import re
from urllib.parse import quote
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

# 项目内部导包
from config import settings
from redis_client import get_redis

logger = logging.getLogger(__name__)

CacheKey = Sequence[Any]

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def _escape_glob(value: str) -> str:
    """转义Redis SCAN MATCH中的通配符"""
    return _GLOB_SPECIAL.sub(r"\\\1", value)


class QueryCache:
    """查询缓存服务"""

    SEPARATOR = ":"

    def __init__(self, redis_client=None, namespace: Optional[str] = None, ttl: Optional[int] = None):
        """
        初始化查询缓存

        Args:
            redis_client: Redis客户端，为None时使用全局连接池
            namespace: key命名空间
            ttl: 缓存过期时间（秒）
        """
        self._redis = redis_client
        self.namespace = namespace or settings.CACHE_NAMESPACE
        self.ttl = ttl or settings.QUERY_CACHE_TTL
        # 正在进行的读取任务
        self._in_flight: Dict[str, asyncio.Task] = {}
        # 每个key的版本号，失效/补丁/回滚时递增，旧版本的读取结果不会写回缓存
        self._generations: Dict[str, int] = {}

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def build_key(self, key: CacheKey) -> str:
        """将分段key拼接为Redis key"""
        parts = [self.namespace]
        for part in key:
            # 段内的分隔符需要转义，否则 ["game-logs", "a"] 会匹配到用户 "a:b" 的key
            parts.append("" if part is None else quote(str(part), safe=""))
        return self.SEPARATOR.join(parts)

    def _is_under(self, full_key: str, full_prefix: str) -> bool:
        return full_key == full_prefix or full_key.startswith(full_prefix + self.SEPARATOR)

    def _bump(self, full_key: str):
        self._generations[full_key] = self._generations.get(full_key, 0) + 1

    async def _keys_under(self, full_prefix: str) -> List[str]:
        """列出Redis中位于前缀下的所有key"""
        keys = []
        async for key in self.redis.scan_iter(match=_escape_glob(full_prefix) + "*"):
            if isinstance(key, bytes):
                key = key.decode("utf-8")
            if self._is_under(key, full_prefix):
                keys.append(key)
        return keys

    async def _write(self, full_key: str, raw: str):
        await self.redis.setex(full_key, self.ttl, raw)

    async def read(self, key: CacheKey) -> Optional[Any]:
        """
        读取缓存数据

        Args:
            key: 分段key

        Returns:
            缓存数据，不存在时返回None
        """
        raw = await self.redis.get(self.build_key(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def fetch(self, key: CacheKey, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        """
        读穿缓存：命中则直接返回，否则执行fetcher并写入缓存

        同一个key同时只会有一个读取任务在执行，后来的调用者等待同一个结果。

        Args:
            key: 分段key
            fetcher: 从存储读取数据的协程函数，返回值需可JSON序列化

        Returns:
            查询数据
        """
        full_key = self.build_key(key)

        raw = await self.redis.get(full_key)
        if raw is not None:
            return json.loads(raw)

        task = self._in_flight.get(full_key)
        if task is None:
            task = asyncio.create_task(self._run_fetch(full_key, fetcher))
            self._in_flight[full_key] = task
            task.add_done_callback(lambda t, k=full_key: self._forget(k, t))

        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            # 读取任务被取消，直接读一次最新数据，结果不写缓存
            logger.info(f"查询已被取消，重新读取: key={full_key}")
            return await fetcher()

    async def _run_fetch(self, full_key: str, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        generation = self._generations.get(full_key, 0)
        data = await fetcher()

        if self._generations.get(full_key, 0) == generation:
            await self._write(full_key, json.dumps(data))
        else:
            logger.debug(f"缓存已在读取期间变更，丢弃旧结果: key={full_key}")
        return data

    def _forget(self, full_key: str, task: asyncio.Task):
        if self._in_flight.get(full_key) is task:
            del self._in_flight[full_key]

    async def invalidate(self, prefix: CacheKey) -> int:
        """
        使前缀下的所有缓存失效，下次读取会重新查询存储

        Args:
            prefix: 分段key前缀

        Returns:
            删除的缓存数量
        """
        full_prefix = self.build_key(prefix)

        for full_key in list(self._generations) + list(self._in_flight):
            if self._is_under(full_key, full_prefix):
                self._bump(full_key)

        keys = await self._keys_under(full_prefix)
        for full_key in keys:
            self._bump(full_key)
        if keys:
            await self.redis.delete(*keys)

        logger.debug(f"缓存失效: prefix={full_prefix}, 数量={len(keys)}")
        return len(keys)

    async def patch(self, key: CacheKey, updater: Callable[[Any], Any]) -> bool:
        """
        用updater修改单个已缓存的数据

        Args:
            key: 分段key
            updater: 接收旧数据返回新数据的函数

        Returns:
            缓存存在并已修改时返回True
        """
        return await self._patch_full(self.build_key(key), updater)

    async def patch_under(self, prefix: CacheKey, updater: Callable[[Any], Any]) -> int:
        """
        用updater修改前缀下所有已缓存的数据，不区分key的其余部分

        Args:
            prefix: 分段key前缀
            updater: 接收旧数据返回新数据的函数

        Returns:
            修改的缓存数量
        """
        patched = 0
        for full_key in await self._keys_under(self.build_key(prefix)):
            if await self._patch_full(full_key, updater):
                patched += 1
        return patched

    async def _patch_full(self, full_key: str, updater: Callable[[Any], Any]) -> bool:
        raw = await self.redis.get(full_key)
        if raw is None:
            return False

        data = updater(json.loads(raw))
        self._bump(full_key)
        await self._write(full_key, json.dumps(data))
        return True

    async def cancel_in_flight(self, prefix: CacheKey) -> int:
        """
        取消前缀下正在进行的读取任务，被取消的任务不会写缓存

        Args:
            prefix: 分段key前缀

        Returns:
            取消的任务数量
        """
        full_prefix = self.build_key(prefix)
        tasks = []
        for full_key, task in list(self._in_flight.items()):
            if self._is_under(full_key, full_prefix) and not task.done():
                self._bump(full_key)
                task.cancel()
                tasks.append(task)

        if tasks:
            # 等待任务真正结束，结果（含CancelledError）由各自的调用者处理
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"已取消进行中的查询: prefix={full_prefix}, 数量={len(tasks)}")
        return len(tasks)

    async def snapshot(self, prefix: CacheKey) -> Dict[str, Optional[str]]:
        """
        对前缀下的缓存做快照，保存原始JSON字符串

        Args:
            prefix: 分段key前缀

        Returns:
            {Redis key: 原始值}
        """
        snapshots = {}
        for full_key in await self._keys_under(self.build_key(prefix)):
            snapshots[full_key] = await self.redis.get(full_key)
        return snapshots

    async def restore(self, snapshots: Dict[str, Optional[str]]):
        """
        将快照原样写回缓存

        Args:
            snapshots: snapshot()的返回值
        """
        for full_key, raw in snapshots.items():
            self._bump(full_key)
            if raw is None:
                await self.redis.delete(full_key)
            else:
                await self._write(full_key, raw)


# 全局查询缓存实例
_query_cache: Optional[QueryCache] = None


def get_query_cache() -> QueryCache:
    """获取全局查询缓存，可用于FastAPI的Depends"""
    global _query_cache

    if _query_cache is None:
        _query_cache = QueryCache()
        logger.info(f"查询缓存初始化完成，命名空间: {_query_cache.namespace}")
    return _query_cache
