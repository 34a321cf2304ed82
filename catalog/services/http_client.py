import httpx
import logging
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)


class StoreHTTPClient:
    """Pooled HTTP client for the remote store. No retry logic: failures surface to the caller."""

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: Optional[float] = None, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url if base_url is not None else settings.rest_url
        self.api_key = api_key if api_key is not None else settings.supabase_key

        limits = httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0
        )

        request_timeout = timeout if timeout is not None else settings.request_timeout
        timeout_config = httpx.Timeout(
            timeout=request_timeout,
            connect=min(5.0, request_timeout),
        )

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"

        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            limits=limits,
            timeout=timeout_config,
            transport=transport,
        )

    def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        logger.debug("%s %s%s params=%s", method, self.base_url, path, kwargs.get("params"))
        return self._client.request(method, path, **kwargs)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# Global HTTP client instance
_global_client: Optional[StoreHTTPClient] = None


def get_http_client() -> StoreHTTPClient:
    """Get or create the global HTTP client."""
    global _global_client
    if _global_client is None:
        _global_client = StoreHTTPClient()
    return _global_client


def cleanup_http_client() -> None:
    """Close the global HTTP client."""
    global _global_client
    if _global_client:
        _global_client.close()
        _global_client = None
