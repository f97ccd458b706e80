import pytest

from src.qr_attendance.qr_attendance.attendance.service import AttendanceService
from src.qr_attendance.qr_attendance.core.enums import OutcomeKind, PersistenceErrorKind
from src.qr_attendance.qr_attendance.core.exceptions import PersistenceError
from src.qr_attendance.qr_attendance.payload.parser import parse


def test_first_mark_records_then_already_marked(attendance_repo, fixed_now):
    svc = AttendanceService(attendance_repo)
    jane = parse("21BCE001 Jane Doe")

    assert svc.mark_present(jane, now=fixed_now) == OutcomeKind.RECORDED
    assert svc.mark_present(jane, now=fixed_now) == OutcomeKind.ALREADY_MARKED

    assert attendance_repo.insert_calls == 1
    rec = attendance_repo.rows["21BCE001"]
    assert (rec.first_name, rec.last_name, rec.marked_at) == ("Jane", "Doe", fixed_now)


def test_lookup_failure_raises_lookup_failed(attendance_repo):
    attendance_repo.lookup_error = ConnectionError("network down")
    svc = AttendanceService(attendance_repo)

    with pytest.raises(PersistenceError) as exc:
        svc.mark_present(parse("21BCE001 Jane Doe"))

    assert exc.value.kind == PersistenceErrorKind.LOOKUP_FAILED
    assert attendance_repo.insert_calls == 0


def test_insert_failure_raises_insert_failed(attendance_repo):
    attendance_repo.insert_error = TimeoutError("gateway timeout")
    svc = AttendanceService(attendance_repo)

    with pytest.raises(PersistenceError) as exc:
        svc.mark_present(parse("21BCE001 Jane Doe"))

    assert exc.value.kind == PersistenceErrorKind.INSERT_FAILED
    assert attendance_repo.rows == {}


def test_concurrent_insert_conflict_counts_as_already_marked(attendance_repo, fixed_now):
    svc = AttendanceService(attendance_repo)
    jane = parse("21BCE001 Jane Doe")
    svc.mark_present(jane, now=fixed_now)
    attendance_repo.hide_from_lookup.add("21BCE001")

    assert svc.mark_present(jane, now=fixed_now) == OutcomeKind.ALREADY_MARKED
    assert len(attendance_repo.rows) == 1


def test_list_present_formats_rows(attendance_repo, fixed_now):
    svc = AttendanceService(attendance_repo)
    svc.mark_present(parse("21BCE001 Jane Doe"), now=fixed_now)

    rows = [svc.to_ui(r) for r in svc.list_present(limit=10)]

    assert rows == [
        {
            "registration_number": "21BCE001",
            "first_name": "Jane",
            "last_name": "Doe",
            "marked_at": "2026-02-01 08:30:00",
        }
    ]
