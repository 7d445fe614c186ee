"""
日记时间线服务类
把记录过的比赛整理成时间线卡片
"""
# 标准库导包
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

# 项目内部导包
from models import (
    EmptyState,
    LoggedGamesFilters,
    RootedForDisplay,
    TimelineCard,
    TimelineData
)
from routers.services.game_log_service import GameLogService
from routers.utils.team_display import (
    get_boxscore_url,
    get_rooted_for_display,
    get_status_tag,
    get_team_abbreviation
)

# 配置日志
logger = logging.getLogger(__name__)

MODE_LABELS = {
    "attended": "🏟️ Attended",
    "watched": "📺 Watched",
}


def render_star_rating(rating: Optional[int]) -> List[bool]:
    """五颗星的点亮状态，未评分返回空列表"""
    if not rating:
        return []
    return [star <= rating for star in range(1, 6)]


def format_added_on(created_at: str) -> str:
    """格式化添加日期，例如 Oct 18, 2026"""
    created = datetime.fromisoformat(created_at)
    return f"{created.strftime('%b')} {created.day}, {created.year}"


class DiaryService:
    """日记时间线服务类"""

    def __init__(self, game_log_service: GameLogService):
        """
        初始化时间线服务

        Args:
            game_log_service: 日记服务
        """
        self.game_log_service = game_log_service

    @staticmethod
    def build_card(game: Dict[str, Any]) -> TimelineCard:
        """
        把一条记录过的比赛转换为时间线卡片

        Args:
            game: list_logged_games返回的单项

        Returns:
            TimelineCard
        """
        log = game["log_data"]
        league = game["league"]

        rooted_for = get_rooted_for_display(
            log.get("rooted_for"),
            game["home_team"],
            game["away_team"],
            game.get("home_score"),
            game.get("away_score"),
            league
        )

        return TimelineCard(
            game_id=game["game_id"],
            game_log_id=log["id"],
            league=league,
            status_tag=get_status_tag(game),
            venue=game.get("venue"),
            home_team=get_team_abbreviation(game["home_team"], league),
            away_team=get_team_abbreviation(game["away_team"], league),
            home_score=game.get("home_score"),
            away_score=game.get("away_score"),
            date=game["date"],
            game_datetime=game.get("game_datetime"),
            boxscore_url=get_boxscore_url(game),
            mode=log["mode"],
            mode_label=MODE_LABELS.get(log["mode"], log["mode"]),
            rating=log.get("rating"),
            rating_stars=render_star_rating(log.get("rating")),
            rating_label=None if log.get("rating") else "Not rated",
            rooted_for=RootedForDisplay(**rooted_for),
            company=log.get("company") or "Solo",
            notes=log.get("notes") or "No notes",
            added_on=format_added_on(log["created_at"])
        )

    async def build_timeline(self, user_id: Optional[str], filters: LoggedGamesFilters) -> TimelineData:
        """
        生成时间线

        Args:
            user_id: 当前用户ID
            filters: 过滤条件

        Returns:
            TimelineData
        """
        game_logs = await self.game_log_service.list_game_logs(user_id)
        logged_games = await self.game_log_service.list_logged_games(user_id, filters)

        cards = [self.build_card(game) for game in logged_games]
        logger.debug(f"生成时间线: user_id={user_id}, 日记数={len(game_logs)}, 卡片数={len(cards)}")

        return TimelineData(
            # 有日记才显示过滤器
            show_filters=len(game_logs) > 0,
            total=len(cards),
            cards=cards,
            empty_state=None if cards else EmptyState()
        )
