from .collect import build_league_report
from .formatters import format_json, format_markdown
from .models import LeagueReport

__all__ = ["build_league_report", "format_json", "format_markdown", "LeagueReport"]
