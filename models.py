"""
数据模型定义
"""
# 标准库导包
from typing import Any, Optional, List
from datetime import datetime, date

# 第三方库导包
from pydantic import BaseModel, Field


class UserInfo(BaseModel):
    """用户信息模型"""
    user_id: str
    name: Optional[str] = None


# ========== 比赛目录相关模型 ==========

class GameResponse(BaseModel):
    """比赛响应模型"""
    game_id: str
    league: str
    season: int
    date: date
    game_datetime: Optional[datetime] = None
    home_team: str
    away_team: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    venue: Optional[str] = None
    playoff: bool = False
    game_type: str = "R"
    doubleheader: str = "N"
    game_num: Optional[int] = None

    model_config = {"from_attributes": True}


class GameListResponse(BaseModel):
    """比赛列表响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: List[GameResponse]
    total: int


class GameFilters(BaseModel):
    """比赛过滤条件，原样透传给存储查询和缓存key"""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    league: Optional[str] = None
    season: Optional[int] = None
    playoff: Optional[bool] = None
    search: Optional[str] = None


class LoggedGamesFilters(GameFilters):
    """日记页过滤条件，比比赛列表多一个观赛方式"""
    mode: Optional[str] = None


# ========== 日记相关模型 ==========

class CreateGameLogRequest(BaseModel):
    """创建日记请求模型，字段规则由validate_game_log_input统一校验"""
    game_id: Optional[str] = Field(None, description="比赛ID")
    mode: Optional[str] = Field(None, description="观赛方式：attended/watched")
    company: Optional[str] = Field(None, description="同行人，最多255字")
    # 不做类型转换，true或"5"交给校验器拒绝
    rating: Any = Field(None, description="评分1-5")
    rooted_for: Optional[str] = Field(None, description="支持的球队，最多100字，none表示中立")
    notes: Optional[str] = Field(None, description="备注，最多1000字")


class UpdateGameLogRequest(BaseModel):
    """更新日记请求模型，比赛ID创建后不可修改"""
    mode: Optional[str] = Field(None, description="观赛方式：attended/watched")
    company: Optional[str] = Field(None, description="同行人，最多255字")
    # 不做类型转换，true或"5"交给校验器拒绝
    rating: Any = Field(None, description="评分1-5")
    rooted_for: Optional[str] = Field(None, description="支持的球队，最多100字，none表示中立")
    notes: Optional[str] = Field(None, description="备注，最多1000字")


class GameLogResponse(BaseModel):
    """日记响应模型"""
    id: str
    user_id: str
    game_id: str
    mode: str
    rating: Optional[int] = None
    rooted_for: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GameLogListResponse(BaseModel):
    """日记列表响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: List[GameLogResponse]
    total: int


class GameLogDetailResponse(BaseModel):
    """单条日记响应模型"""
    success: bool = True
    message: str = "操作成功"
    data: GameLogResponse


class DeleteGameLogResponse(BaseModel):
    """删除日记响应模型，返回被删除的ID"""
    success: bool = True
    message: str = "删除成功"
    data: str


class LoggedGameResponse(GameResponse):
    """记录过的比赛：比赛信息加上对应的日记"""
    log_data: GameLogResponse


class LoggedGameListResponse(BaseModel):
    """记录过的比赛列表响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: List[LoggedGameResponse]
    total: int


# ========== 日记时间线相关模型 ==========

class RootedForDisplay(BaseModel):
    """支持球队展示"""
    team: Optional[str] = None
    label: str
    result: Optional[str] = None


class TimelineCard(BaseModel):
    """时间线卡片"""
    game_id: str
    game_log_id: str
    league: str
    status_tag: Optional[str] = None
    venue: Optional[str] = None
    home_team: str
    away_team: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    date: date
    game_datetime: Optional[datetime] = None
    boxscore_url: Optional[str] = None
    mode: str
    mode_label: str
    rating: Optional[int] = None
    rating_stars: List[bool] = Field(default_factory=list, description="五颗星是否点亮，未评分为空")
    rating_label: Optional[str] = None
    rooted_for: RootedForDisplay
    company: str
    notes: str
    added_on: str


class EmptyState(BaseModel):
    """没有记录时的提示"""
    title: str = "No games logged yet"
    description: str = "Start building your game diary by adding games you've watched or attended."
    action_label: str = "Browse Games"
    action_path: str = "/"


class TimelineData(BaseModel):
    """时间线数据"""
    title: str = "Diary"
    subtitle: str = (
        "A personal record of every game you've attended or watched. "
        "Explore your timeline of moments that mattered."
    )
    show_filters: bool
    total: int
    cards: List[TimelineCard] = Field(default_factory=list)
    empty_state: Optional[EmptyState] = None


class TimelineResponse(BaseModel):
    """时间线响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: TimelineData


# ========== 欢迎弹窗相关模型 ==========

class WelcomeFeature(BaseModel):
    """欢迎弹窗功能点"""
    icon: str
    text: str


class WelcomeData(BaseModel):
    """欢迎弹窗内容"""
    show: bool
    title: str = "Welcome to GamedayDiary!"
    tagline: str = "Relive every game you've watched, whether you were in the stadium or on the couch."
    features: List[WelcomeFeature] = Field(default_factory=lambda: [
        WelcomeFeature(icon="search", text="Search thousands of MLB games"),
        WelcomeFeature(icon="book-open", text="Add games to your personal diary"),
        WelcomeFeature(icon="trophy", text="Track teams you've rooted for, and whether they won or lost"),
    ])
    hint: str = "Start by browsing your favorite team's past games and build your timeline."
    action_label: str = "Browse Games"
    action_path: str = "/"
    footer: str = "GamedayDiary currently supports MLB only. We're working on NFL next, with NBA to follow!"


class WelcomeResponse(BaseModel):
    """欢迎弹窗响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: WelcomeData
