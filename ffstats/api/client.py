"""Sleeper HTTP access: a pacing limiter and a retrying JSON client.

Every request made by the fetch layer goes through :class:`SleeperClient`, so
pacing, retry policy and the base URL are configured in one place.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ffstats.constants import DEFAULT_MIN_INTERVAL_SEC

logger = logging.getLogger(__name__)

BASE_URL = os.environ.get("SLEEPER_BASE_URL", "https://api.sleeper.com/v1")
REQUEST_TIMEOUT_SEC = 20
RETRY_STATUSES = (408, 429, 500, 502, 503, 504)


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning("ignoring non-numeric %s=%r", name, raw)
        return None


class RateLimiter:
    """Keeps consecutive ``wait()`` calls at least ``min_interval`` seconds apart."""

    def __init__(self, min_interval_sec: float | None = None) -> None:
        self.min_interval = float(min_interval_sec) if min_interval_sec else DEFAULT_MIN_INTERVAL_SEC
        self._last = 0.0

    def wait(self) -> None:
        if self._last:
            remaining = self.min_interval - (time.monotonic() - self._last)
            if remaining > 0:
                time.sleep(remaining)
        self._last = time.monotonic()


class SleeperClient:
    """Read-only Sleeper client.

    ``rpm_limit`` becomes a minimum interval of ``60 / rpm`` seconds and
    ``min_interval_ms`` is an explicit floor; the larger of the two applies.
    Transient failures are retried with backoff by the mounted adapter.
    """

    def __init__(
        self,
        base_url: str | None = None,
        rpm_limit: float | None = None,
        min_interval_ms: float | None = None,
    ) -> None:
        self.base_url = (base_url or BASE_URL).rstrip("/")
        intervals = []
        if rpm_limit and rpm_limit > 0:
            intervals.append(60.0 / rpm_limit)
        if min_interval_ms and min_interval_ms > 0:
            intervals.append(float(min_interval_ms) / 1000.0)
        self.rate = RateLimiter(max(intervals) if intervals else None)
        self.session = self._build_session()

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        session.headers.update({"User-Agent": "ffstats/2.0"})
        retry = Retry(
            total=5,
            connect=3,
            read=3,
            backoff_factor=0.5,
            status_forcelist=RETRY_STATUSES,
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @classmethod
    def from_env(cls) -> SleeperClient:
        """Client paced by ``SLEEPER_RPM_LIMIT`` and ``SLEEPER_MIN_INTERVAL_MS``."""
        return cls(
            BASE_URL,
            rpm_limit=_env_float("SLEEPER_RPM_LIMIT"),
            min_interval_ms=_env_float("SLEEPER_MIN_INTERVAL_MS"),
        )

    def get_json(self, path: str) -> Any:
        """GET ``path`` relative to the base URL and decode the JSON body.

        Raises requests.HTTPError once retries are exhausted on a non-2xx reply.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        self.rate.wait()
        logger.debug("GET %s", url)
        r = self.session.get(url, timeout=REQUEST_TIMEOUT_SEC)
        r.raise_for_status()
        return r.json()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> SleeperClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
