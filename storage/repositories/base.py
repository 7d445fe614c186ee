"""
基础Repository类
"""
# 标准库导包
from typing import TypeVar, Generic, Optional, List, Dict, Any
from abc import ABC

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, and_, inspect
from sqlalchemy.sql import func

# 项目内部导包
from storage.database import Base

# 泛型类型
ModelType = TypeVar('ModelType', bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """基础Repository类，提供通用的CRUD操作"""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        """
        初始化Repository

        Args:
            session: 数据库会话
            model: 数据库模型类
        """
        self.session = session
        self.model = model
        # 主键列（games表的主键是game_id而不是id）
        self.pk = inspect(model).primary_key[0]

    async def get_by_id(self, id) -> Optional[ModelType]:
        """
        根据主键获取单条记录

        Args:
            id: 主键值

        Returns:
            模型实例或None
        """
        result = await self.session.execute(
            select(self.model).where(self.pk == id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs) -> ModelType:
        """
        创建新记录

        Args:
            **kwargs: 模型字段值

        Returns:
            创建的模型实例
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update_where(self, filters: Dict[str, Any], **kwargs) -> int:
        """
        按过滤条件更新记录

        Args:
            filters: 过滤条件字典，所有条件同时满足才会更新
            **kwargs: 要更新的字段值

        Returns:
            受影响的行数
        """
        conditions = self._build_filter_conditions(filters)
        result = await self.session.execute(
            update(self.model)
            .where(and_(*conditions))
            .values(**kwargs)
        )
        await self.session.flush()
        return result.rowcount

    async def delete_where(self, filters: Dict[str, Any]) -> int:
        """
        按过滤条件删除记录

        Args:
            filters: 过滤条件字典

        Returns:
            受影响的行数
        """
        conditions = self._build_filter_conditions(filters)
        result = await self.session.execute(
            delete(self.model).where(and_(*conditions))
        )
        await self.session.flush()
        return result.rowcount

    async def count(self, **filters) -> int:
        """
        统计记录数量

        Args:
            **filters: 过滤条件

        Returns:
            记录数量
        """
        query = select(func.count(self.pk))

        conditions = self._build_filter_conditions(filters)
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return result.scalar_one()

    def _build_filter_conditions(self, filters: Dict[str, Any]) -> List:
        """
        构建过滤条件

        Args:
            filters: 过滤条件字典

        Returns:
            条件列表
        """
        conditions = []

        for key, value in filters.items():
            if not hasattr(self.model, key):
                continue

            column = getattr(self.model, key)

            if isinstance(value, (list, tuple)):
                # IN 条件
                conditions.append(column.in_(value))
            elif isinstance(value, dict):
                # 高级条件（如范围查询）
                for op, val in value.items():
                    if op == 'gt':
                        conditions.append(column > val)
                    elif op == 'gte':
                        conditions.append(column >= val)
                    elif op == 'lt':
                        conditions.append(column < val)
                    elif op == 'lte':
                        conditions.append(column <= val)
                    elif op == 'ilike':
                        conditions.append(column.ilike(f"%{val}%"))
                    elif op == 'ne':
                        conditions.append(column != val)
                    else:
                        # 默认等于
                        conditions.append(column == val)
            else:
                # 等于条件
                conditions.append(column == value)

        return conditions

    async def query_by_filters(
        self,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[str] = None,
        order_desc: bool = True
    ) -> List[ModelType]:
        """
        根据过滤条件查询记录

        Args:
            filters: 过滤条件字典
            limit: 限制返回数量
            offset: 偏移量
            order_by: 排序字段
            order_desc: 是否降序

        Returns:
            模型实例列表
        """
        conditions = self._build_filter_conditions(filters)
        query = select(self.model)

        if conditions:
            query = query.where(and_(*conditions))

        if order_by and hasattr(self.model, order_by):
            column = getattr(self.model, order_by)
            if order_desc:
                query = query.order_by(column.desc())
            else:
                query = query.order_by(column.asc())

        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())
