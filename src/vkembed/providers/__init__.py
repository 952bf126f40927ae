"""
vkembed.providers - Video metadata providers.

Example:
    >>> from vkembed.providers import VkVideoProvider
    >>> provider = VkVideoProvider(access_token="service-key")
"""

from vkembed.providers.base import MetadataProvider
from vkembed.providers.types import LookupOutcome, ProviderError
from vkembed.providers.vk import VkVideoProvider

__all__ = [
    "LookupOutcome",
    "MetadataProvider",
    "ProviderError",
    "VkVideoProvider",
]
