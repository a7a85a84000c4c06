# makemyloop/services/client.py
# -*- coding: utf-8 -*-
"""
Concrete HTTP client for the loop pipeline:
- Composes GeocodingMixin + RoutingMixin
- Centralizes HTTP (session, retries, headers)
- Applies simple rate-limiting and optional caching
- Emits standardized, high-signal logs for observability

Notes
-----
• Infra knobs live in ServiceConfig (URLs, timeouts, retries, cache, UA).
• Mixins call _get, which lands here and does:
    - cache lookup
    - rate-limit gate
    - request through a urllib3 Retry adapter (the retry policy)
    - JSON decode + error mapping (429→RateLimited, OSRM NoRoute→Unroutable)
• Entry points should call init_logging(); this module only fetches the logger.
"""

from __future__ import annotations

import json as _json
import time as _time
from typing import Any as _Any, Dict as _Dict, Optional as _Optional

import requests as _req
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from makemyloop.infra.logging import get_logger
from .common import (
      _RateLimiter
    , _retry_after_seconds
    , _extract_error_text
    , _Cache
    , _sha_key
    , ServiceConfig
    , RateLimited
    , Unroutable
)
from .mixins import GeocodingMixin, RoutingMixin

_log = get_logger(__name__)

# OSRM answers 400 with one of these codes when the points cannot be joined
_NO_ROUTE_CODES = frozenset({"NoRoute", "NoSegment", "NoMatch"})


class LoopServicesClient(GeocodingMixin, RoutingMixin):
    """
    HTTP client for the geocoder and the router.

      - ORDINARY: LoopServicesClient(cfg=ServiceConfig(...))
      - TESTS:    LoopServicesClient(cfg=..., session=<fake with .request()>)
    """

    def __init__(
        self,
        cfg: ServiceConfig | None = None,
        *,
        session: _Optional[_req.Session] = None,
        rate_limiter: _Optional[_RateLimiter] = None,
    ):
        self.cfg = cfg or ServiceConfig()

        if session is None:
            session = _req.Session()
            retries = Retry(
                  total=self.cfg.max_retries
                , connect=self.cfg.max_retries
                , read=min(1, self.cfg.max_retries)  # at most one re-read
                , backoff_factor=self.cfg.backoff_s
                , status_forcelist=(429, 500, 502, 503, 504)
                , allowed_methods=frozenset(["GET", "HEAD", "OPTIONS"])
                , respect_retry_after_header=True
                , raise_on_status=False
            )
            adapter = HTTPAdapter(max_retries=retries)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self._sess = session
        self._sess.headers.update(
            {
                  "User-Agent": self.cfg.user_agent
                , "Accept": "application/json"
            }
        )

        self._rate_limiter = rate_limiter or _RateLimiter(
              max_calls=self.cfg.rate_limit_calls
            , per_seconds=self.cfg.rate_limit_per_s
        )

        self._cache = (
            _Cache(self.cfg.cache_path, ttl_s=self.cfg.cache_ttl_s)
            if self.cfg.cache_path else None
        )

        _log.debug(
            "LoopServicesClient ready geocoder=%s router=%s retries=%s cache=%s",
              self.cfg.geocoder_url
            , self.cfg.router_url
            , self.cfg.max_retries
            , self.cfg.cache_path
        )

    # ────────────────────────────────────────────────────────────────────────
    # Lifecycle helpers
    # ────────────────────────────────────────────────────────────────────────
    @classmethod
    def from_env(cls) -> "LoopServicesClient":
        """Convenience ctor reading every knob from the environment."""
        return cls(cfg=ServiceConfig())

    def close(self) -> None:
        """Explicitly close the underlying HTTP session."""
        self._sess.close()

    def __enter__(self) -> "LoopServicesClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ────────────────────────────────────────────────────────────────────────
    # Core HTTP layer (used by GeocodingMixin / RoutingMixin)
    # ────────────────────────────────────────────────────────────────────────
    def _get(
        self,
        base_url: str,
        path: str,
        params: _Optional[_Dict[str, _Any]] = None,
        *,
        cache: bool = True,
        empty_on_client_error: bool = False,
    ) -> _Any:
        """
        Single entry point for GET:
          1) cache check (endpoint+params hash key)
          2) rate-limit gate
          3) request with retries
          4) map errors; parse JSON; cache store

        `empty_on_client_error` turns a 4xx refusal (other than 429) into None
        instead of an HTTPError; such answers are not cached.
        """
        url = f"{base_url}{path}"
        params = params or {}
        use_cache = cache and self._cache is not None
        key = _sha_key(f"GET:{url}", params)

        if use_cache:
            cached = self._cache.get(key)
            if cached is not None:
                _log.debug("HTTP GET %s — cache HIT", path)
                return cached

        self._rate_limiter.wait()

        t0 = _time.time()
        try:
            resp = self._sess.request(
                  "GET"
                , url
                , params=params
                , timeout=self.cfg.timeouts
            )
        except _req.RequestException as e:
            _log.error(
                "HTTP GET %s — request exception %s after %.0f ms",
                  path
                , type(e).__name__
                , (_time.time() - t0) * 1000.0
            )
            raise
        dt_ms = (_time.time() - t0) * 1000.0

        # 429 survived the adapter's retries
        if resp.status_code == 429:
            wait_s = _retry_after_seconds(resp)
            _log.warning("HTTP 429 %s (%.0f ms) retry_after=%s", path, dt_ms, wait_s)
            raise RateLimited(f"429 from {path}; retry after {wait_s or 'unknown'}s")

        if 200 <= resp.status_code < 300:
            try:
                data = resp.json()
            except ValueError:
                _log.error(
                    "HTTP GET %s — invalid JSON (%.0f ms): %s",
                    path, dt_ms, (resp.text or "")[:200]
                )
                raise

            size_b = len(_json.dumps(data, ensure_ascii=False).encode("utf-8"))
            _log.info(
                "HTTP GET %s — %s (%.0f ms, %s B)",
                path, resp.status_code, dt_ms, size_b
            )

            if use_cache:
                try:
                    self._cache.set(key, data)
                except Exception:  # noqa: BLE001
                    # cache failures must not break the request path
                    _log.debug("cache set failed (non-fatal) for key=%s", key[:12])
            return data

        # OSRM "no route" family
        if resp.status_code in (400, 404):
            code = _osrm_code(resp)
            if code in _NO_ROUTE_CODES:
                _log.warning(
                    "HTTP GET %s — %s (%.0f ms) no-route code=%s",
                    path, resp.status_code, dt_ms, code
                )
                raise Unroutable(f"No route for {path}: {code}")

        if empty_on_client_error and 400 <= resp.status_code < 500:
            _log.warning(
                "HTTP GET %s — %s (%.0f ms) query refused: %s",
                path, resp.status_code, dt_ms, _extract_error_text(resp)
            )
            return None

        msg = _extract_error_text(resp)
        _log.error(
            "HTTP GET %s — %s (%.0f ms) body=%s",
            path, resp.status_code, dt_ms, msg
        )
        resp.raise_for_status()
        # non-2xx codes that requests does not treat as errors (1xx/3xx)
        raise _req.HTTPError(f"Unexpected status {resp.status_code} for {path}", response=resp)


def _osrm_code(resp) -> _Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body.get("code") if isinstance(body, dict) else None


__all__ = ["LoopServicesClient", "ServiceConfig"]
