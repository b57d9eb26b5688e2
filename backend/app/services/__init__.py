from .wine_store import WineStore
from .api_key_cache import ApiKeyCache
from .sommelier import Sommelier
from .completion import LiteLLMCompletionClient, MockCompletionClient, get_completion_client
from .cellar import CellarService, get_cellar_service

__all__ = [
    "WineStore",
    "ApiKeyCache",
    "Sommelier",
    "LiteLLMCompletionClient",
    "MockCompletionClient",
    "get_completion_client",
    "CellarService",
    "get_cellar_service",
]
