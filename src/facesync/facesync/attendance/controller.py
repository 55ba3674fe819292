from __future__ import annotations

import logging
from typing import Any, Callable

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import DEFAULT_SESSION_HISTORY_LIMIT
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _status_for(error: DomainError) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    return 400


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _payload() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def _respond(action: Callable[[], Any], *, status: int = 200, failure_message: str):
        try:
            data = action()
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), _status_for(e)
        except Exception:
            logger.exception(failure_message)
            return jsonify({"success": False, "message": failure_message}), 500
        return jsonify({"success": True, "data": data}), status

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def api_health():
        return jsonify({"status": "ok"}), 200

    @app.route("/api/templates", methods=["POST"], endpoint="api_enroll")
    def api_enroll():
        """Enroll (or re-enroll) the face template of a student."""
        data = _payload()
        return _respond(
            lambda: service.enroll(data.get("owner_id"), data.get("landmarks")).to_dict(),
            status=201,
            failure_message="Lỗi hệ thống khi lưu mẫu khuôn mặt",
        )

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    def api_checkin():
        data = _payload()
        return _respond(
            lambda: service.check_in(data.get("landmarks")).to_dict(),
            failure_message="Lỗi hệ thống khi nhận diện khuôn mặt",
        )

    @app.route("/api/attendance", methods=["POST"], endpoint="api_open_session")
    def api_open_session():
        data = _payload()
        return _respond(
            lambda: service.open_session(data.get("course_id")).to_dict(),
            status=201,
            failure_message="Lỗi hệ thống khi mở buổi điểm danh",
        )

    @app.route("/api/attendance", methods=["GET"], endpoint="api_active_session")
    def api_active_session():
        course_id = request.args.get("course_id", "")
        return _respond(
            lambda: service.get_active_session(course_id).to_dict(),
            failure_message="Lỗi hệ thống khi tải buổi điểm danh",
        )

    @app.route("/api/attendance", methods=["PUT"], endpoint="api_confirm_attendance")
    def api_confirm_attendance():
        data = _payload()
        return _respond(
            lambda: service.confirm_attendance(data.get("course_id"), data.get("student_id")).to_dict(),
            failure_message="Lỗi hệ thống khi điểm danh",
        )

    @app.route("/api/attendance/close", methods=["POST"], endpoint="api_close_session")
    def api_close_session():
        data = _payload()
        return _respond(
            lambda: service.close_session(data.get("course_id")).to_dict(),
            failure_message="Lỗi hệ thống khi đóng buổi điểm danh",
        )

    @app.route("/api/attendance/<int:session_id>", methods=["GET"], endpoint="api_get_session")
    def api_get_session(session_id: int):
        return _respond(
            lambda: service.get_session(session_id).to_dict(),
            failure_message="Lỗi hệ thống khi tải buổi điểm danh",
        )

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_session_history")
    def api_session_history():
        course_id = request.args.get("course_id", "")
        limit = request.args.get("limit", default=DEFAULT_SESSION_HISTORY_LIMIT)
        return _respond(
            lambda: [s.to_dict() for s in service.list_sessions(course_id, limit=limit)],
            failure_message="Lỗi hệ thống khi tải lịch sử điểm danh",
        )
