"""Example: drive the engine through the service layer (no request layer involved)."""

from datetime import date

from src.attendance_portal.attendance_portal.core.enums import LectureType, MarkStatus
from src.attendance_portal.attendance_portal.main import create_container


def main():
    engine = create_container().engine

    session_id = engine.create_or_get_session(timetable_slot_id=1, session_date=date.today())
    results = engine.bulk_set(session_id, MarkStatus.PRESENT, edited_by=1)
    print(f"marked {sum(r.ok for r in results)}/{len(results)} students in session {session_id}")
    engine.lock_session(session_id)

    print(engine.get_attendance(student_id=1))
    for group in engine.get_leaderboard(class_id=1, lecture_type=LectureType.PRACTICAL):
        print(group.batch_id, [(e.rank, e.student_name, e.percentage) for e in group.entries])
    print(engine.get_achievement_status(student_id=1))


if __name__ == "__main__":
    main()
