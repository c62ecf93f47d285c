"""Speech resource lookup: local cache, bundled recordings and remote download."""

from core.resources.bundled import BundledResourceStrategy
from core.resources.interface import (
    ResourceError,
    ResourceNotFoundError,
    ResourceStrategy,
    ResourceTransientError,
)
from core.resources.local_file import LocalFileStrategy
from core.resources.remote_fetch import RemoteFetchStrategy
from core.resources.resolver import CascadingResolver

__all__: list[str] = [
    "BundledResourceStrategy",
    "CascadingResolver",
    "LocalFileStrategy",
    "RemoteFetchStrategy",
    "ResourceError",
    "ResourceNotFoundError",
    "ResourceStrategy",
    "ResourceTransientError",
]
