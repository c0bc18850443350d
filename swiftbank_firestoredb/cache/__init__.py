from .ttl_cache import LIST_KEY, TTLCache

__all__ = ["LIST_KEY", "TTLCache"]
