"""
GameLog模型 - 观赛日记表
"""
# 标准库导包
import uuid
from datetime import datetime
from typing import Optional

# 第三方库导包
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class GameLog(Base):
    """观赛日记表"""

    __tablename__ = "user_game_logs"

    # 核心字段
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    game_id: Mapped[str] = mapped_column(String(64), ForeignKey("games.game_id"), nullable=False, comment="比赛ID，创建后不可修改")
    mode: Mapped[str] = mapped_column(String(20), nullable=False, comment="方式：attended/watched")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 扩展字段
    rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="评分1-5")
    rooted_for: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, comment="支持的球队，none表示中立")
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, comment="同行人，为空表示独自")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="备注，最多1000字")

    # 关系定义
    game: Mapped["Game"] = relationship("Game", back_populates="logs")

    __table_args__ = (
        UniqueConstraint("user_id", "game_id", name="uq_user_game"),
        Index("idx_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<GameLog(id={self.id}, user_id={self.user_id}, game_id={self.game_id}, mode={self.mode})>"
