"""Example: use the service layer directly (no Flask).

Prints this week's course calendar for the demo cohort monitor.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.classroom_admin.classroom_admin.container import build_container
from src.classroom_admin.classroom_admin.core.enums import CalendarView


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    actor = container.auth_service.authenticate("student1@test.com", "demo1234")
    window, events = container.schedule_service.calendar_for(actor, view=CalendarView.WEEK, anchor=date.today())
    print(f"{window.start} .. {window.end}")
    for event in events:
        print(f"  {event.start:%a %H:%M}-{event.end:%H:%M}  {event.title}  ({event.instructor_name or '-'})")


if __name__ == "__main__":
    main()
