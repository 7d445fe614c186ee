"""
Game模型 - 比赛目录表
"""
# 标准库导包
import datetime
from typing import Optional

# 第三方库导包
from sqlalchemy import String, Boolean, Integer, Date, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class Game(Base):
    """比赛目录表，数据由外部导入，日记只引用不修改"""

    __tablename__ = "games"

    # 核心字段
    game_id: Mapped[str] = mapped_column(String(64), primary_key=True, comment="比赛ID")
    league: Mapped[str] = mapped_column(String(20), nullable=False, default="MLB", comment="联盟")
    season: Mapped[int] = mapped_column(Integer, nullable=False, index=True, comment="赛季")
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True, comment="比赛日期")
    game_datetime: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime, nullable=True, comment="开赛时间")
    home_team: Mapped[str] = mapped_column(String(100), nullable=False, comment="主队名称")
    away_team: Mapped[str] = mapped_column(String(100), nullable=False, comment="客队名称")
    home_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="主队得分，未完赛为空")
    away_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="客队得分，未完赛为空")
    venue: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, comment="球场")

    # 扩展字段
    playoff: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, comment="是否季后赛")
    game_type: Mapped[str] = mapped_column(String(2), nullable=False, default="R", comment="类型：R常规赛/E表演赛/S春训/P季后赛")
    doubleheader: Mapped[str] = mapped_column(String(1), nullable=False, default="N", comment="双重赛：N否/S分场/Y连场")
    game_num: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="双重赛场次")

    # 关系定义
    logs: Mapped[list["GameLog"]] = relationship("GameLog", back_populates="game")

    # 复合索引
    __table_args__ = (
        Index("idx_league_date", "league", "date"),
    )

    def __repr__(self):
        return f"<Game(game_id={self.game_id}, {self.away_team}@{self.home_team}, date={self.date})>"
