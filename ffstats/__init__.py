"""Season-standings analytics for Sleeper fantasy football leagues.

Re-exports the subpackages: ``compute`` (pure analytics), ``api`` (Sleeper
fetch layer), ``report`` (markdown/JSON assembly) and ``cli``.
"""

from importlib import import_module as _imp

_SUBPACKAGES = ["compute", "api", "report", "cli"]

for _name in _SUBPACKAGES:
    _imp(f"ffstats.{_name}")

__all__ = list(_SUBPACKAGES)
