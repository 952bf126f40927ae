"""
Default configuration values for vkembed.

Note: Runtime settings are resolved via config/loader.py, which layers
environment variables, project config and user config over these values.
"""

# VK API endpoint and version used for video.get
VK_API_BASE_URL = "https://api.vk.com/method"
VK_API_VERSION = "5.199"

# Timeout (seconds) for the single metadata lookup per request
REQUEST_TIMEOUT = 10.0

# Embed player template
EMBED_BASE_URL = "https://vk.com/video_ext.php"
EMBED_QUALITY = "2"  # hd=2
EMBED_AUTOPLAY = "0"  # autoplay=0

# HTTP listener
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000

# CORS headers sent on every response
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}
