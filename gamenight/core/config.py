# gamenight/core/config.py
import os

ESPN_SITE_BASE = os.getenv("ESPN_SITE_BASE", "https://site.api.espn.com/apis/site/v2/sports")
ESPN_COMMON_BASE = os.getenv("ESPN_COMMON_BASE", "https://site.web.api.espn.com/apis/common/v3/sports")

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))
HTTP_MAX_TRIES = int(os.getenv("HTTP_MAX_TRIES", "2"))

# Calendar used for "today" / "tomorrow" and scoreboard dates
APP_TZ = os.getenv("APP_TZ", "America/New_York")

# Optional fixed season label for player stats, e.g. "2025-26"
SEASON_LABEL = os.getenv("SEASON_LABEL") or None

DATABASE_URL = os.getenv("DATABASE_URL") or None
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
