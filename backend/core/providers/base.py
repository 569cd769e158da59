"""HTTP liveness probing for candidate radar sources."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import requests
from requests import Response

from backend.core.abstractions import ProbeAttempt


logger = logging.getLogger(__name__)


class ProbeError(RuntimeError):
    """Base error for a candidate that cannot be confirmed as reachable."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProbeTimeout(ProbeError):
    """Raised when the candidate does not answer within the timeout."""


@dataclass
class RequestConfig:
    timeout: float = 5.0
    user_agent: str = "mrms-radar-probe/1.0"
    # Servers that refuse HEAD get a streamed GET whose body is never read.
    head_fallback_statuses: Iterable[int] = (403, 405, 501)


class HttpProbe:
    """Checks that a URL exists without downloading it."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or self._build_session(self.request_config)
        self._clock = clock
        self._log = logging.getLogger(self.__class__.__name__)

    def _build_session(self, config: RequestConfig) -> requests.Session:
        session = requests.Session()
        session.headers.update({"User-Agent": config.user_agent})
        return session

    def check(self, url: str, timeout: Optional[float] = None) -> int:
        """Return the success status code for ``url`` or raise :class:`ProbeError`."""
        timeout = self.request_config.timeout if timeout is None else timeout
        response = self._request("HEAD", url, timeout)
        if response.status_code in tuple(self.request_config.head_fallback_statuses):
            self._log.debug("HEAD refused by %s (%s), retrying with GET", url, response.status_code)
            response = self._request("GET", url, timeout, stream=True)
            response.close()
        return self._handle_response(response)

    def probe(self, url: str, timeout: Optional[float] = None) -> ProbeAttempt:
        started = self._clock()
        try:
            status_code = self.check(url, timeout)
        except ProbeError as exc:
            return ProbeAttempt(
                url=url,
                reachable=False,
                elapsed=self._clock() - started,
                status_code=exc.status_code,
                error=str(exc),
            )
        return ProbeAttempt(url=url, reachable=True, elapsed=self._clock() - started, status_code=status_code)

    def _handle_response(self, response: Response) -> int:
        if not 200 <= response.status_code < 300:
            raise ProbeError(f"HTTP {response.status_code}", status_code=response.status_code)
        return response.status_code

    def _request(self, method: str, url: str, timeout: float, **kwargs) -> Response:
        try:
            return self.session.request(method, url, timeout=timeout, allow_redirects=True, **kwargs)
        except requests.Timeout as exc:
            raise ProbeTimeout(f"timed out after {timeout:g}s") from exc
        except requests.RequestException as exc:
            raise ProbeError(f"request failed: {exc.__class__.__name__}") from exc


__all__ = ["HttpProbe", "ProbeError", "ProbeTimeout", "RequestConfig"]
