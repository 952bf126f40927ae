"""
vkembed.providers.vk.client - VkVideoProvider implementation.

Looks up video metadata with the VK API ``video.get`` method using a
service access token, sent as a POST form so it stays out of request URLs.
One request per lookup, bounded by a timeout, no retries.

Example:
    >>> provider = VkVideoProvider(access_token="service-key")
    >>> outcome = await provider.fetch_metadata(reference)
    >>> outcome.first.player_url
    'https://vk.com/video_ext.php?oid=-1&id=2&hash=ab'
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from vkembed.config import defaults
from vkembed.exceptions import ProviderTransportError
from vkembed.models.video_metadata import VideoMetadata
from vkembed.providers.base import MetadataProvider
from vkembed.providers.types import LookupOutcome

if TYPE_CHECKING:
    from vkembed.config.loader import ServiceConfig
    from vkembed.models.video_reference import VideoReference

logger = logging.getLogger(__name__)

VIDEO_GET_METHOD = "video.get"


class VkVideoProvider(MetadataProvider):
    """VK API metadata provider.

    Args:
        access_token: VK service access key.
        api_base_url: Base URL of the VK method API.
        api_version: VK API version sent as ``v``.
        timeout: Total timeout in seconds for the lookup.
        client: Optional pre-built httpx.AsyncClient (owned by the caller).
    """

    def __init__(
        self,
        access_token: str,
        *,
        api_base_url: str = defaults.VK_API_BASE_URL,
        api_version: str = defaults.VK_API_VERSION,
        timeout: float = defaults.REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self._access_token = access_token
        self._api_base_url = api_base_url.rstrip("/")
        self._api_version = api_version
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config: ServiceConfig) -> VkVideoProvider:
        """Build a provider from resolved configuration.

        Raises:
            ConfigurationMissingError: If no access token is configured.
        """
        return cls(
            config.require_access_token(),
            api_base_url=config.api_base_url,
            api_version=config.api_version,
            timeout=config.request_timeout,
        )

    @property
    def name(self) -> str:
        return "vk"

    def is_available(self) -> bool:
        return bool(self._access_token)

    @property
    def method_url(self) -> str:
        return f"{self._api_base_url}/{VIDEO_GET_METHOD}"

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(self, lookup_key: str) -> dict[str, Any]:
        """Perform the single video.get call and decode the JSON body.

        Parameters go in a form body so the access token never appears in a
        request URL (httpx logs URLs at INFO).
        """
        form = {
            "videos": lookup_key,
            "access_token": self._access_token,
            "v": self._api_version,
        }
        client = self._get_client()

        try:
            response = await client.post(self.method_url, data=form, timeout=self._timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"VK API timed out after {self._timeout}s for {lookup_key}")
            raise ProviderTransportError(f"VK API request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"VK API returned HTTP {status} for {lookup_key}")
            raise ProviderTransportError(
                f"VK API returned HTTP {status}", http_code=status
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"VK API request failed for {lookup_key}: {e}")
            raise ProviderTransportError(f"VK API request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"VK API returned invalid JSON for {lookup_key}")
            raise ProviderTransportError(f"VK API returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProviderTransportError("VK API returned an unexpected payload")
        return data

    async def fetch_metadata(self, reference: VideoReference) -> LookupOutcome:
        lookup_key = reference.lookup_key
        logger.info(f"Calling VK API for video: {lookup_key}")

        start = time.time()
        data = await self._request(lookup_key)
        logger.info("VK API answered for %s in %.1fs", lookup_key, time.time() - start)

        return parse_video_get_response(data)


def parse_video_get_response(data: dict[str, Any]) -> LookupOutcome:
    """Turn a decoded ``video.get`` body into a LookupOutcome.

    Args:
        data: Decoded JSON body.

    Returns:
        Failure outcome for an ``error`` payload, otherwise a success
        outcome with one record per item (possibly none).
    """
    error = data.get("error")
    if error:
        if not isinstance(error, dict):
            error = {}
        logger.error(
            "VK API error: code=%s msg=%s", error.get("error_code"), error.get("error_msg")
        )
        return LookupOutcome.failure(error.get("error_code"), error.get("error_msg"))

    body = data.get("response") or {}
    items = body.get("items") if isinstance(body, dict) else None
    records = [VideoMetadata.from_api_item(item) for item in items or [] if isinstance(item, dict)]

    if not records:
        logger.warning("No videos found in VK response")
    return LookupOutcome.success(records)
