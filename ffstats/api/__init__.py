from .client import RateLimiter, SleeperClient
from .loader import fetch_state, load_league_history, load_season

__all__ = ["RateLimiter", "SleeperClient", "fetch_state", "load_league_history", "load_season"]
