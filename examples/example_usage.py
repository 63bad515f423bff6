"""Example: mark attendance through the service layer (no Flask).

Requires a database prepared with scripts/init_db.py and scripts/seed_db.py.
"""

import importlib

from config import get_settings_module

from src.campus_attendance.campus_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    code = container.token_validator.issue("demo-session-1")
    result = container.attendance_service.submit(
        "demo-student-1",
        code,
        {"latitude": 12.9717, "longitude": 77.5947},
    )
    print(result.to_payload())
    print(container.progression_service.get_summary("demo-student-1"))


if __name__ == "__main__":
    main()
