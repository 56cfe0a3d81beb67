"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the decision rules live in the services.
"""

from src.beacon_attendance.beacon_attendance.container import build_container
from src.beacon_attendance.beacon_attendance.database.seed import seed_demo_data


def main():
    container = build_container(storage_backend="memory")
    seed_demo_data(container.users_repo, container.rooms_repo)

    student = container.users_repo.get_by_username("STU12345")
    first = container.attendance_service.mark_attendance(student.user_id, "room-a", 1.8)
    again = container.attendance_service.mark_attendance(student.user_id, "room-a", 1.2)
    too_far = container.attendance_service.mark_attendance(student.user_id, "room-b", 4.5)

    print(first.record.to_dict())
    print(again.error.value, "-", again.message)
    print(too_far.error.value, "-", too_far.message)

    today = container.clock.now().date()
    print(container.analytics_service.compute_stats("room-a", today, total_enrolled=30).to_dict())


if __name__ == "__main__":
    main()
