from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FaceTemplate:
    """Thực thể miền (domain): mẫu khuôn mặt đã chuẩn hoá của một người."""

    template_id: int
    owner_id: str
    vector: tuple[float, ...]
    created_at: Optional[datetime] = None

    @property
    def dimension(self) -> int:
        return len(self.vector)

    def to_dict(self) -> dict:
        return {
            "template_id": self.template_id,
            "owner_id": self.owner_id,
            "dimension": self.dimension,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class MatchResult:
    """Kết quả nhận diện. `NO_MATCH` là kết quả bình thường, không phải lỗi."""

    owner_id: Optional[str] = None
    template_id: Optional[int] = None
    score: Optional[float] = None

    @property
    def matched(self) -> bool:
        return self.owner_id is not None

    def to_dict(self) -> dict:
        return {
            "matched": self.matched,
            "owner_id": self.owner_id,
            "template_id": self.template_id,
            "score": self.score,
        }


NO_MATCH = MatchResult()
