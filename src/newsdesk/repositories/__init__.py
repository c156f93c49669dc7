from .base import BaseRepository, InvalidOrderError
from .news_repo import NewsRepository

__all__ = [
    "BaseRepository",
    "InvalidOrderError",
    "NewsRepository",
]
