"""
球队展示相关工具
球队缩写、技术统计链接、比赛标签等
"""
# 标准库导包
from datetime import date, timedelta
from typing import Optional

# 项目内部导包
from config import settings


# MLB球队全称 -> 缩写
MLB_TEAM_ABBREVIATIONS = {
    "Arizona Diamondbacks": "ARI",
    "Atlanta Braves": "ATL",
    "Baltimore Orioles": "BAL",
    "Boston Red Sox": "BOS",
    "Chicago Cubs": "CHC",
    "Chicago White Sox": "CWS",
    "Cincinnati Reds": "CIN",
    "Cleveland Guardians": "CLE",
    "Cleveland Indians": "CLE",
    "Colorado Rockies": "COL",
    "Detroit Tigers": "DET",
    "Houston Astros": "HOU",
    "Kansas City Royals": "KC",
    "Los Angeles Angels": "LAA",
    "Los Angeles Dodgers": "LAD",
    "Miami Marlins": "MIA",
    "Milwaukee Brewers": "MIL",
    "Minnesota Twins": "MIN",
    "New York Mets": "NYM",
    "New York Yankees": "NYY",
    "Oakland Athletics": "OAK",
    "Athletics": "ATH",
    "Philadelphia Phillies": "PHI",
    "Pittsburgh Pirates": "PIT",
    "San Diego Padres": "SD",
    "San Francisco Giants": "SF",
    "Seattle Mariners": "SEA",
    "St. Louis Cardinals": "STL",
    "Tampa Bay Rays": "TB",
    "Texas Rangers": "TEX",
    "Toronto Blue Jays": "TOR",
    "Washington Nationals": "WSH",
}

# 技术统计网站使用的球队代码与常用缩写不同的部分
BOXSCORE_TEAM_CODES = {
    "ATH": "OAK",
    "CHC": "CHN",
    "CWS": "CHA",
    "KC": "KCA",
    "LAA": "ANA",
    "LAD": "LAN",
    "MIA": "FLO",
    "NYM": "NYN",
    "NYY": "NYA",
    "SD": "SDN",
    "SF": "SFN",
    "STL": "SLN",
    "TB": "TBA",
    "WSH": "WAS",
}


def get_team_abbreviation(team_name: str, league: str = "MLB") -> str:
    """
    获取球队缩写

    Args:
        team_name: 球队全称，已经是缩写时原样返回
        league: 联盟，目前只支持MLB

    Returns:
        球队缩写，未知球队返回名称前三个字母的大写
    """
    if not team_name:
        return ""
    if league == "MLB":
        abbreviation = MLB_TEAM_ABBREVIATIONS.get(team_name)
        if abbreviation:
            return abbreviation
        if team_name.upper() in MLB_TEAM_ABBREVIATIONS.values():
            return team_name.upper()
    return team_name[:3].upper()


def generate_boxscore_url(home_team_abbr: str, game_date: date, game_number: str = "0") -> str:
    """
    生成比赛技术统计页面地址

    Args:
        home_team_abbr: 主队缩写
        game_date: 比赛日期
        game_number: 双重赛场次，普通比赛为"0"

    Returns:
        技术统计页面URL
    """
    code = BOXSCORE_TEAM_CODES.get(home_team_abbr, home_team_abbr)
    return f"{settings.BOXSCORE_BASE_URL}/{code}/{code}{game_date.strftime('%Y%m%d')}{game_number}.shtml"


def get_boxscore_url(game: dict) -> Optional[str]:
    """
    比赛卡片的技术统计链接，只有昨天及以前的比赛才有

    Args:
        game: 比赛数据字典

    Returns:
        URL或None
    """
    game_date = _as_date(game["date"])
    yesterday = date.today() - timedelta(days=1)
    if game_date > yesterday:
        return None

    home_team_abbr = get_team_abbreviation(game["home_team"], game["league"])
    game_number = str(game["game_num"]) if game.get("doubleheader") == "S" and game.get("game_num") else "0"
    return generate_boxscore_url(home_team_abbr, game_date, game_number)


def get_status_tag(game: dict) -> Optional[str]:
    """比赛类型标签：表演赛、春训、季后赛，常规赛没有标签"""
    if game.get("game_type") == "E":
        return "Exhibition"
    if game.get("game_type") == "S":
        return "Spring Training"
    if game.get("playoff"):
        return "Playoff"
    return None


def get_rooted_for_display(
    rooted_for: Optional[str],
    home_team: str,
    away_team: str,
    home_score: Optional[int],
    away_score: Optional[int],
    league: str = "MLB"
) -> dict:
    """
    支持球队的展示信息

    Args:
        rooted_for: 支持的球队名称，空或none表示中立
        home_team: 主队名称
        away_team: 客队名称
        home_score: 主队得分
        away_score: 客队得分
        league: 联盟

    Returns:
        {"team": 缩写或None, "label": 展示文本, "result": "W"/"L"/None}
    """
    if not rooted_for or rooted_for == "none":
        return {"team": None, "label": "No team", "result": None}

    is_home_team = rooted_for.lower() == home_team.lower()
    team_abbr = get_team_abbreviation(home_team if is_home_team else away_team, league)

    # 只有已完赛且分出胜负的比赛才显示胜负
    result = None
    if home_score is not None and away_score is not None and home_score != away_score:
        did_win = (is_home_team and home_score > away_score) or (not is_home_team and away_score > home_score)
        result = "W" if did_win else "L"

    label = f"{team_abbr} ({result})" if result else team_abbr
    return {"team": team_abbr, "label": label, "result": result}


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])
