import importlib
import json
import os
from types import ModuleType

# APP_ENV value -> settings module; anything else falls back to development.
_SETTINGS_BY_ENV = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _SETTINGS_BY_ENV.get(env, "config.development")


def load_settings() -> ModuleType:
    return importlib.import_module(get_settings_module())


def parse_rosters(raw) -> dict:
    """Đọc MEMORY_ROSTERS: JSON dạng {"CSC101": ["SV01", "SV02"], ...}.

    Chỉ dùng cho STORAGE_BACKEND=memory, nơi không có bảng course_enrollments.
    """
    if not raw:
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict) or not all(isinstance(v, list) for v in data.values()):
        raise ValueError("MEMORY_ROSTERS phải là object JSON: course_id -> danh sách mã sinh viên")
    return {str(course): [str(s) for s in students] for course, students in data.items()}
