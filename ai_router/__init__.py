"""AI Router

Routes chat/completion requests across multiple AI provider APIs with
quota enforcement, cost tracking and cross-provider fallback.
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("ai-router")
except PackageNotFoundError:
    # Fallback for source checkouts that were never installed
    __version__ = "0.1.0"
__author__ = "AI Router"
