# makemyloop/services/common.py
# -*- coding: utf-8 -*-
"""
Common pieces for the geocoding/routing client stack:
- Error classes (the failure variants of the loop pipeline)
- Simple sliding-window rate limiter
- Lightweight SQLite cache (keyed by endpoint+payload hash)
- Helpers for Retry-After and response error extraction
- ServiceConfig (base URLs, timeouts, retry policy, cache settings, UA)

Pure infra: no HTTP calls here, those live in makemyloop/services/client.py.
No init_logging here either; entry points configure logging.
"""

from __future__ import annotations

import hashlib
import json
import os
import sqlite3
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from makemyloop.core.config import get_project_config
from makemyloop.infra.logging import get_logger

# ────────────────────────────────────────────────────────────────────────────────
# Errors
# ────────────────────────────────────────────────────────────────────────────────

class LoopError(Exception):
    """Base class for failures that end one loop generation."""

    user_message = "Loop generation failed"


class InvalidTarget(LoopError, ValueError):
    """Requested distance/duration is not a finite number > 0."""

    user_message = "Invalid distance/duration value"


class AddressNotFound(LoopError):
    """Raised when the geocoder returned no candidate for the address."""

    user_message = "Address not found"


class Unroutable(LoopError):
    """Raised when the routing service found no route through the anchors."""

    user_message = "No walkable route found for this loop"


class RateLimited(LoopError):
    """Raised when a 429 was still seen after the transport retries."""

    user_message = "Too many requests, try again in a moment"


# ────────────────────────────────────────────────────────────────────────────────
# Logging
# ────────────────────────────────────────────────────────────────────────────────

_log = get_logger(__name__)

def _short(v: Any, maxlen: int = 420) -> str:
    """
    Safe, concise preview of a Python object for logs.
    """
    try:
        s = json.dumps(v, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        s = str(v)
    return s if len(s) <= maxlen else (s[:maxlen] + " …")


# ────────────────────────────────────────────────────────────────────────────────
# Rate limiter
# ────────────────────────────────────────────────────────────────────────────────

class _RateLimiter:
    """
    Very simple sliding-window rate limiter, shared by threads.
    The public Nominatim instance asks for at most 1 request per second.
    """
    def __init__(self, max_calls: int = 1, per_seconds: float = 1.0) -> None:
        self.max_calls = int(max_calls)
        self.per = float(per_seconds)
        self.ts: list[float] = []
        self._lock = threading.Lock()

    def wait(self) -> None:
        """
        If the window is saturated, sleep just enough to fall below the threshold.
        """
        if self.max_calls <= 0:
            return
        with self._lock:
            now = time.time()
            self.ts = [t for t in self.ts if (now - t) < self.per]
            if len(self.ts) >= self.max_calls:
                sleep_s = self.per - (now - self.ts[0]) + 0.05
                if sleep_s > 0:
                    _log.debug(
                        "rate-limit: window=%ss max_calls=%s current=%s → sleeping %.3fs",
                        self.per, self.max_calls, len(self.ts), sleep_s
                    )
                    time.sleep(sleep_s)
            self.ts.append(time.time())


# ────────────────────────────────────────────────────────────────────────────────
# Retry-After helper (RFC 7231)
# ────────────────────────────────────────────────────────────────────────────────

def _retry_after_seconds(resp) -> Optional[float]:
    """
    Extract Retry-After header as seconds.
    Supports delta-seconds or HTTP-date. Returns None if not present/parsable.
    """
    ra = getattr(resp, "headers", {}).get("Retry-After")
    if not ra:
        return None
    try:
        return float(ra)
    except (ValueError, TypeError):
        pass
    # e.g. 'Wed, 21 Oct 2015 07:28:00 GMT'
    try:
        dt = datetime.strptime(ra, "%a, %d %b %Y %H:%M:%S %Z").replace(tzinfo=timezone.utc)
    except ValueError:
        return None
    return max(0.0, (dt - datetime.now(timezone.utc)).total_seconds())


# ────────────────────────────────────────────────────────────────────────────────
# Cache (SQLite)
# ────────────────────────────────────────────────────────────────────────────────

class _Cache:
    """
    Very small key/value cache backed by SQLite.
    Keys are opaque hashes (see _sha_key), values are JSON blobs.
    TTL is enforced on read; expired entries are treated as misses.
    """
    def __init__(self, path: str, ttl_s: int) -> None:
        self._path = path
        self._ttl = int(ttl_s)
        self._ensure()

    def _ensure(self) -> None:
        parent = os.path.dirname(self._path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        con = sqlite3.connect(self._path)
        try:
            with con:
                con.execute("""
                    CREATE TABLE IF NOT EXISTS cache (
                          k  TEXT PRIMARY KEY
                        , v  BLOB NOT NULL
                        , ts INTEGER NOT NULL
                    )
                """)
        finally:
            con.close()
        _log.debug("cache: ensured db at %s (ttl_s=%s)", self._path, self._ttl)

    def get(self, k: str) -> Optional[Any]:
        con = sqlite3.connect(self._path)
        try:
            row = con.execute("SELECT v, ts FROM cache WHERE k = ?", (k,)).fetchone()
        finally:
            con.close()
        if not row:
            _log.debug("cache: MISS key=%s", k[:12])
            return None
        v_raw, ts = row
        age = int(time.time()) - int(ts)
        if age > self._ttl:
            _log.debug("cache: EXPIRED key=%s age=%ss ttl=%ss", k[:12], age, self._ttl)
            return None
        try:
            val = json.loads(v_raw)
        except ValueError:
            _log.debug("cache: CORRUPT JSON key=%s", k[:12])
            return None
        _log.debug("cache: HIT key=%s age=%ss", k[:12], age)
        return val

    def set(self, k: str, v: Any) -> None:
        payload = json.dumps(v, ensure_ascii=False)
        con = sqlite3.connect(self._path)
        try:
            with con:
                con.execute(
                    "INSERT OR REPLACE INTO cache(k,v,ts) VALUES (?,?,?)",
                    (k, payload, int(time.time())),
                )
        finally:
            con.close()
        _log.debug("cache: SET key=%s size=%sB", k[:12], len(payload.encode("utf-8")))


# ────────────────────────────────────────────────────────────────────────────────
# Small utils
# ────────────────────────────────────────────────────────────────────────────────

def _sha_key(endpoint: str, payload: Dict[str, Any]) -> str:
    """
    Stable key for (endpoint, payload); keys order doesn't affect the hash.
    """
    msg = endpoint + "||" + json.dumps(payload, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(msg.encode("utf-8")).hexdigest()

def _extract_error_text(resp) -> str:
    """
    Best-effort extraction of a human-friendly error from a HTTP response.
    """
    try:
        j = resp.json()
    except ValueError:
        return (getattr(resp, "text", "") or "")[:500] or "<no-text>"
    if isinstance(j, dict):
        return _short(j)
    return str(j)


# ────────────────────────────────────────────────────────────────────────────────
# Config
# ────────────────────────────────────────────────────────────────────────────────

class ServiceConfig:
    """
    Configuration bundle for the geocoding/routing client.

    Parameters
    ----------
    geocoder_url : str | None
        Nominatim base URL (no trailing slash). Env MAKEMYLOOP_GEOCODER_URL.
    router_url : str | None
        OSRM base URL (no trailing slash). Env MAKEMYLOOP_ROUTER_URL.
    routing_profile : str | None
        OSRM profile used for loops. Env MAKEMYLOOP_ROUTING_PROFILE.
    connect_timeout_s : float
        TCP connect timeout (seconds).
    read_timeout_s : float
        Response/read timeout (seconds).
    max_retries : int | None
        Transport retries for 429/5xx and read errors. 0 fails fast.
        Env MAKEMYLOOP_MAX_RETRIES.
    backoff_s : float
        Base backoff (seconds) between retries.
    rate_limit_calls / rate_limit_per_s : int / float
        Sliding window for outgoing calls. 0 calls disables the limiter.
    cache_path : str | None
        SQLite response cache; None disables caching.
    cache_ttl_s : int
        Cache TTL in seconds (default 7 days).
    language : str | None
        Accept-Language hint for geocoder labels.
    contact_email : str | None
        Sent to Nominatim as `email`, as its usage policy asks.
        Env MAKEMYLOOP_CONTACT_EMAIL.
    user_agent : str | None
        Sent as User-Agent.
    """
    def __init__(
        self,
        geocoder_url: str | None = None,
        router_url: str | None = None,
        routing_profile: str | None = None,
        connect_timeout_s: float = 6.0,
        read_timeout_s: float = 20.0,
        max_retries: int | None = None,
        backoff_s: float = 0.5,
        rate_limit_calls: int = 1,
        rate_limit_per_s: float = 1.0,
        cache_path: str | None = ".cache/makemyloop_http.sqlite",
        cache_ttl_s: int = 7 * 24 * 3600,
        language: str | None = None,
        contact_email: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        project = get_project_config()

        self.geocoder_url = (
            geocoder_url
            or os.getenv("MAKEMYLOOP_GEOCODER_URL")
            or "https://nominatim.openstreetmap.org"
        ).rstrip("/")
        self.router_url = (
            router_url
            or os.getenv("MAKEMYLOOP_ROUTER_URL")
            or "https://router.project-osrm.org"
        ).rstrip("/")
        self.routing_profile = str(
            routing_profile or os.getenv("MAKEMYLOOP_ROUTING_PROFILE") or "foot"
        )
        self.connect_timeout_s = float(connect_timeout_s)
        self.read_timeout_s = float(read_timeout_s)
        if max_retries is None:
            max_retries = int(os.getenv("MAKEMYLOOP_MAX_RETRIES", "2"))
        self.max_retries = max(0, int(max_retries))
        self.backoff_s = float(backoff_s)
        self.rate_limit_calls = int(rate_limit_calls)
        self.rate_limit_per_s = float(rate_limit_per_s)
        self.cache_path = (
            os.path.abspath(os.path.expanduser(cache_path)) if cache_path else None
        )
        self.cache_ttl_s = int(cache_ttl_s)
        self.language = language or project.default_language
        self.contact_email = (contact_email or os.getenv("MAKEMYLOOP_CONTACT_EMAIL", "")).strip()
        self.user_agent = str(user_agent or f"{project.app_name}/1.0")

        # concise, non-sensitive summary
        _log.info(
            "ServiceConfig init: geocoder=%s router=%s profile=%s timeouts=(%.1f,%.1f)s "
            "retries=%s backoff=%.2fs rate=%s/%.1fs cache=%s ttl=%ss ua=%s",
            self.geocoder_url,
            self.router_url,
            self.routing_profile,
            self.connect_timeout_s,
            self.read_timeout_s,
            self.max_retries,
            self.backoff_s,
            self.rate_limit_calls,
            self.rate_limit_per_s,
            self.cache_path,
            self.cache_ttl_s,
            self.user_agent,
        )

    @property
    def timeouts(self) -> Tuple[float, float]:
        """Return (connect_timeout_s, read_timeout_s) for requests."""
        return (self.connect_timeout_s, self.read_timeout_s)
