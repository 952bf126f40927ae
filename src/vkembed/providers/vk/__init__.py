"""
vkembed.providers.vk - VK video.get metadata provider.

Example:
    >>> provider = VkVideoProvider(access_token="service-key")
    >>> outcome = await provider.fetch_metadata(reference)
"""

from vkembed.providers.vk.client import VkVideoProvider

__all__ = ["VkVideoProvider"]
