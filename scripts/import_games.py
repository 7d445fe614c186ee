"""
从CSV导入比赛目录的脚本

用法:
    python scripts/import_games.py games.csv

CSV表头需包含: game_id, league, season, date, home_team, away_team
可选列: game_datetime, home_score, away_score, venue, playoff, game_type, doubleheader, game_num
"""
# 标准库导包
import asyncio
import csv
import sys
from datetime import date, datetime
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# 项目内部导包
from storage import get_session, init_db, cleanup_db
from storage.repositories import GameRepository


def _optional_int(value):
    value = (value or "").strip()
    return int(value) if value else None


def parse_game_row(row: dict) -> dict:
    """把CSV的一行转换为Game字段"""
    game_datetime = (row.get("game_datetime") or "").strip()
    return {
        "game_id": row["game_id"].strip(),
        "league": (row.get("league") or "MLB").strip(),
        "season": int(row["season"]),
        "date": date.fromisoformat(row["date"].strip()),
        "game_datetime": datetime.fromisoformat(game_datetime) if game_datetime else None,
        "home_team": row["home_team"].strip(),
        "away_team": row["away_team"].strip(),
        "home_score": _optional_int(row.get("home_score")),
        "away_score": _optional_int(row.get("away_score")),
        "venue": (row.get("venue") or "").strip() or None,
        "playoff": (row.get("playoff") or "").strip().lower() in ("1", "true", "yes", "y"),
        "game_type": (row.get("game_type") or "R").strip() or "R",
        "doubleheader": (row.get("doubleheader") or "N").strip() or "N",
        "game_num": _optional_int(row.get("game_num")),
    }


async def main(csv_path: str):
    """主函数"""
    print(f"开始导入比赛目录: {csv_path}")

    try:
        await init_db()

        with open(csv_path, newline="", encoding="utf-8") as f:
            rows = [parse_game_row(row) for row in csv.DictReader(f)]

        created = 0
        async for session in get_session():
            repo = GameRepository(session)
            for fields in rows:
                if await repo.upsert_game(**fields):
                    created += 1

        print(f"✓ 导入完成，共{len(rows)}场比赛，新增{created}场")

    except Exception as e:
        print(f"✗ 导入失败: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1

    finally:
        # 清理数据库连接
        await cleanup_db()

    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("用法: python scripts/import_games.py <games.csv>")
        sys.exit(2)
    exit_code = asyncio.run(main(sys.argv[1]))
    sys.exit(exit_code)
