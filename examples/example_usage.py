"""Ví dụ: dùng service layer (không qua Flask), với backend in-memory.

Mục tiêu: minh hoạ luồng enroll -> mở buổi -> check-in -> xác nhận điểm danh.
"""

from src.facesync.facesync.container import build_container


def main():
    container = build_container(backend="memory")
    container.courses_repo.add_course("CSC101", ["STU-001", "STU-002"])

    service = container.attendance_service
    service.enroll("STU-001", [0.0, 0.0, 4.0, 0.0, 2.0, 3.0])
    service.enroll("STU-002", [0.0, 0.0, 1.0, 4.0, 3.0, 1.0])
    service.open_session("CSC101")

    # Same face, shifted and scaled in the frame
    match = service.check_in([10.0, 10.0, 18.0, 10.0, 14.0, 16.0])
    print(match)
    if match.matched:
        print(service.confirm_attendance("CSC101", match.owner_id).to_dict())


if __name__ == "__main__":
    main()
