from .thread_store import ThreadStore

__all__ = ["ThreadStore"]
