from __future__ import annotations

import json
from typing import Any, Dict, Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..matching.model import FaceTemplate
from .repository import TemplateRepository

_SETTINGS_ID = 1


def _row_to_template(r: Dict[str, Any]) -> FaceTemplate:
    return FaceTemplate(
        template_id=int(r["template_id"]),
        owner_id=str(r["owner_id"]),
        vector=tuple(float(v) for v in json.loads(r["vector_json"])),
        created_at=r.get("created_at"),
    )


class MySQLTemplateRepository(TemplateRepository):
    """Templates in `face_templates`, one row per owner.

    The dimension D lives in the single `face_template_settings` row. Writers
    lock that row first, so checking D and storing the vector happen in one
    transaction and two first enrollments cannot fix different dimensions.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, dimension: Optional[int] = None):
        self._conn_factory = conn_factory
        self._dimension = int(dimension) if dimension else None

    def get_all_templates(self) -> Sequence[FaceTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT template_id, owner_id, vector_json, created_at
                FROM face_templates
                ORDER BY template_id
                """
            )
            return tuple(_row_to_template(r) for r in fetchall(cur))

    def get_for_owner(self, owner_id: str) -> Optional[FaceTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select_owner(cur, owner_id)

    def dimension(self) -> Optional[int]:
        if self._dimension is not None:
            return self._dimension
        with db_cursor(self._conn_factory) as (_, cur):
            return self._stored_dimension(cur, for_update=False)

    def put_template(self, owner_id: str, vector: Sequence[float]) -> FaceTemplate:
        values = [float(v) for v in vector]

        with db_cursor(self._conn_factory) as (_, cur):
            stored = self._stored_dimension(cur, for_update=True)
            expected = self._dimension or stored
            if expected is not None and len(values) != expected:
                raise ValidationError(f"Mẫu khuôn mặt phải có {expected} chiều (nhận được {len(values)})")
            if stored is None:
                cur.execute(
                    "UPDATE face_template_settings SET dimension=%s WHERE settings_id=%s",
                    (len(values), _SETTINGS_ID),
                )

            cur.execute(
                """
                INSERT INTO face_templates(owner_id, dimension, vector_json)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    dimension=VALUES(dimension),
                    vector_json=VALUES(vector_json),
                    created_at=CURRENT_TIMESTAMP(6)
                """,
                (owner_id, len(values), json.dumps(values)),
            )
            template = self._select_owner(cur, owner_id)

        if template is None:
            raise ValidationError("Lưu mẫu khuôn mặt thất bại")
        return template

    def _select_owner(self, cur, owner_id: str) -> Optional[FaceTemplate]:
        cur.execute(
            """
            SELECT template_id, owner_id, vector_json, created_at
            FROM face_templates
            WHERE owner_id=%s
            """,
            (owner_id,),
        )
        r = fetchone(cur)
        return _row_to_template(r) if r else None

    def _stored_dimension(self, cur, *, for_update: bool) -> Optional[int]:
        cur.execute(
            "SELECT dimension FROM face_template_settings WHERE settings_id=%s" + (" FOR UPDATE" if for_update else ""),
            (_SETTINGS_ID,),
        )
        r = fetchone(cur)
        if r is None:
            raise RuntimeError("face_template_settings chưa được khởi tạo, hãy chạy scripts/init_db.py")
        if r["dimension"] is not None:
            return int(r["dimension"])

        # Rows stored before the settings row recorded D.
        cur.execute("SELECT dimension FROM face_templates ORDER BY template_id LIMIT 1")
        r = fetchone(cur)
        return int(r["dimension"]) if r else None
