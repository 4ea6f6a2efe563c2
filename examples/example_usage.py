"""Example: drive the service layer directly (no Flask), against MySQL."""

import importlib

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, timezone_name=settings.ATTENDANCE_TIMEZONE)
    print(container.attendance_service.get_today_status(employee_id=2).to_dict())
    print(container.report_service.personal_month_summary(2).to_dict())


if __name__ == "__main__":
    main()
