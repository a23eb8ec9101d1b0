"""
Unit Tests for Cache Keys
=========================
"""

import pytest

from src.core.cache.keys import CacheKey, CacheNamespace, image_key, size_key
from src.models.schemas import RenderRequest

REQUESTS = [
    {},
    {"temp": "default"},
    {"temp": "quote", "content": "**hi**", "isContentHtml": False},
    {"icon": "https://example.com/a.png", "imgScale": 3},
    {"title": "size_", "switchConfig": {"a": [1, 2]}},
]


@pytest.mark.parametrize("payload", REQUESTS)
def test_image_and_size_keys_never_collide(payload):
    request = RenderRequest.model_validate(payload)
    assert image_key(request) != size_key(request)
    assert str(image_key(request)) != str(size_key(request))


def test_keys_are_deterministic():
    first = RenderRequest.model_validate({"temp": "quote", "title": "A"})
    second = RenderRequest.model_validate({"title": "A", "temp": "quote"})
    assert image_key(first) == image_key(second)
    assert hash(size_key(first)) == hash(size_key(second))


def test_different_requests_get_different_keys():
    first = RenderRequest.model_validate({"content": "one"})
    second = RenderRequest.model_validate({"content": "two"})
    assert image_key(first) != image_key(second)


def test_key_carries_namespace():
    key = size_key(RenderRequest())
    assert key.namespace is CacheNamespace.SIZE
    assert str(key).startswith("size:")
    assert isinstance(key, CacheKey)
