"""Domain entity representing a follow relationship."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Follow:
    id: int | None
    follower_id: int
    following_id: int
    created_at: datetime | None = None


__all__ = ["Follow"]
