from .http import HttpCapability
from .media_provider import MediaProviderPort
from .storage import StoragePort
from .stream_extractor import StreamExtractorPort

__all__ = [
    "HttpCapability",
    "MediaProviderPort",
    "StoragePort",
    "StreamExtractorPort",
]
