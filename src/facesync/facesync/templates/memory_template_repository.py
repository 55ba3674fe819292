from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from ..matching.model import FaceTemplate
from .repository import TemplateRepository


class InMemoryTemplateRepository(TemplateRepository):
    """Process-local template store.

    Writers build a new tuple and swap it in under the lock, readers grab the
    current tuple without locking.
    """

    def __init__(self, *, dimension: Optional[int] = None):
        self._dimension = int(dimension) if dimension else None
        self._templates: tuple[FaceTemplate, ...] = ()
        self._next_id = 1
        self._lock = threading.Lock()

    def get_all_templates(self) -> Sequence[FaceTemplate]:
        return self._templates

    def get_for_owner(self, owner_id: str) -> Optional[FaceTemplate]:
        for t in self._templates:
            if t.owner_id == owner_id:
                return t
        return None

    def dimension(self) -> Optional[int]:
        if self._dimension is not None:
            return self._dimension
        current = self._templates
        return current[0].dimension if current else None

    def put_template(self, owner_id: str, vector: Sequence[float]) -> FaceTemplate:
        values = tuple(float(v) for v in vector)
        with self._lock:
            expected = self.dimension()
            if expected is not None and len(values) != expected:
                raise ValidationError(f"Mẫu khuôn mặt phải có {expected} chiều (nhận được {len(values)})")

            existing = self.get_for_owner(owner_id)
            if existing:
                template = FaceTemplate(
                    template_id=existing.template_id,
                    owner_id=owner_id,
                    vector=values,
                    created_at=now_local(),
                )
                self._templates = tuple(template if t.template_id == existing.template_id else t for t in self._templates)
            else:
                template = FaceTemplate(
                    template_id=self._next_id,
                    owner_id=owner_id,
                    vector=values,
                    created_at=now_local(),
                )
                self._next_id += 1
                self._templates = self._templates + (template,)
            return template
