from .engine import ThreadEngine, build_engine

__all__ = ["ThreadEngine", "build_engine"]
