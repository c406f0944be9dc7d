"""
HTTP transport for the content service.

Anything with a get(url) -> TransportResponse method can stand in for
RequestsTransport; the tests use a scripted fake.
"""

from dataclasses import dataclass
from typing import Optional

import requests

from .config import DEFAULT_HEADERS, REQUEST_TIMEOUT
from .exceptions import FetchError
from .logger import get_module_logger

logger = get_module_logger("transport")


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: bytes


class RequestsTransport:
    """
    GET pages with a shared requests Session.

    Non-200 statuses are returned as-is; the service decides what to do with
    them. Connection problems and timeouts raise FetchError.
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT,
        headers: Optional[dict] = None,
        session: Optional[requests.Session] = None
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        if headers:
            self.session.headers.update(headers)

    def get(self, url: str) -> TransportResponse:
        logger.info(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(
                f"Request failed: {e}",
                category="transport",
                url=url,
                details={"error_type": type(e).__name__}
            ) from e

        logger.info(f" -> status={response.status_code}, bytes={len(response.content)}")
        return TransportResponse(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        self.session.close()
