# 标准库导包
import json
import logging
import threading
from datetime import datetime
from typing import Any, Optional

# 第三方库导包
import redis.asyncio as redis

# 项目内部导包
from config import settings

logger = logging.getLogger(__name__)

# 全局Redis连接池实例
_redis_pool = None
_redis_pool_lock = threading.Lock()


def get_redis():
    """获取Redis连接实例，首次调用时创建连接池"""
    global _redis_pool

    with _redis_pool_lock:
        if _redis_pool is None:
            logger.info("创建新的Redis连接池...")
            _redis_pool = redis.ConnectionPool.from_url(
                settings.REDIS_URL,
                max_connections=50,
                socket_connect_timeout=60.0,  # 连接超时
                socket_keepalive=True,  # 保持连接
                health_check_interval=15,  # 健康检查间隔
                retry_on_timeout=True,  # 超时重试
                decode_responses=True
            )
            logger.info(f"Redis连接池创建完成，连接地址: {settings.REDIS_URL}")

        return redis.Redis(connection_pool=_redis_pool)


async def set_cache(key: str, value: Any, ttl: Optional[int] = None):
    """
    设置缓存

    参数:
        key: 缓存键
        value: 缓存值，会被转换为JSON字符串
        ttl: 过期时间（秒），为None时不过期
    """
    r = get_redis()

    if ttl:
        await r.setex(key, ttl, json.dumps(value))
    else:
        await r.set(key, json.dumps(value))


async def get_cache(key: str):
    """
    获取缓存

    参数:
        key: 缓存键

    返回:
        若缓存存在，返回解析后的值；否则返回None
    """
    r = get_redis()
    data = await r.get(key)
    if data:
        return json.loads(data)
    return None


# ========== 欢迎弹窗相关的Redis操作封装 ==========

async def has_seen_welcome(user_id: str) -> bool:
    """
    用户是否已经关闭过欢迎弹窗

    参数:
        user_id: 用户ID

    返回:
        已关闭过返回True
    """
    welcome_key = f"{settings.REDIS_KEY_PREFIXES['WELCOME_SEEN']}{user_id}"
    return await get_cache(welcome_key) is not None


async def mark_welcome_seen(user_id: str):
    """
    记录用户已关闭欢迎弹窗，该标记不过期

    参数:
        user_id: 用户ID
    """
    welcome_key = f"{settings.REDIS_KEY_PREFIXES['WELCOME_SEEN']}{user_id}"
    await set_cache(welcome_key, {"seen_at": datetime.utcnow().isoformat()})
    logger.info(f"用户 {user_id} 已关闭欢迎弹窗")


