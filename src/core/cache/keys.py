"""
Cache Keys
==========

Rendered images and measured sizes share one store. Keys carry their namespace
explicitly so the two results of the same request never collide.
"""

from dataclasses import dataclass
from enum import Enum
import hashlib

from src.models.schemas import RenderRequest


class CacheNamespace(str, Enum):
    """Logical partition of the cache key space."""

    IMAGE = "image"
    SIZE = "size"


@dataclass(frozen=True)
class CacheKey:
    """Namespace-tagged digest of a serialized render request."""

    namespace: CacheNamespace
    digest: str

    @classmethod
    def for_request(cls, namespace: CacheNamespace, request: RenderRequest) -> "CacheKey":
        digest = hashlib.sha256(request.serialize().encode("utf-8")).hexdigest()
        return cls(namespace=namespace, digest=digest)

    def __str__(self) -> str:
        return f"{self.namespace.value}:{self.digest}"


def image_key(request: RenderRequest) -> CacheKey:
    return CacheKey.for_request(CacheNamespace.IMAGE, request)


def size_key(request: RenderRequest) -> CacheKey:
    return CacheKey.for_request(CacheNamespace.SIZE, request)
