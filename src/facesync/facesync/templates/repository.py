from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..matching.model import FaceTemplate


class TemplateRepository(Protocol):
    """Giao diện repository cho mẫu khuôn mặt (Template Store).

    Lưu ý: `get_all_templates` phải trả về một ảnh chụp nhất quán: mỗi template
    hoặc có đầy đủ vector, hoặc chưa tồn tại.
    """

    def get_all_templates(self) -> Sequence[FaceTemplate]:
        raise NotImplementedError

    def get_for_owner(self, owner_id: str) -> Optional[FaceTemplate]:
        raise NotImplementedError

    def put_template(self, owner_id: str, vector: Sequence[float]) -> FaceTemplate:
        """Store (or replace) the template of ``owner_id``.

        Raises ValidationError when the vector dimension differs from the
        dimension shared by the stored templates.
        """

        raise NotImplementedError

    def dimension(self) -> Optional[int]:
        """Dimension shared by all templates, None while nothing is stored."""

        raise NotImplementedError
