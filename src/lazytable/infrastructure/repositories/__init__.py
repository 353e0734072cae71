from .random_repository import RandomRepository

__all__ = ["RandomRepository"]
