from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from accounts.models import Role, display_name
from api.exceptions import ConflictError, NotFoundError, ValidationError
from .models import Attendance, AttendanceStatus

logger = logging.getLogger(__name__)

MARKABLE_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT)


def parse_day(raw: Any, field: str = "date") -> date:
    """Parse a `YYYY-MM-DD` value, raising ValidationError when malformed."""
    if isinstance(raw, date):
        return raw
    try:
        parsed = parse_date(str(raw)[:10]) if raw else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"Parameter '{field}' must be a date in YYYY-MM-DD format.")
    return parsed


def week_bounds(reference: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing `reference`."""
    start = reference - timedelta(days=reference.weekday())
    return start, start + timedelta(days=6)


def students():
    return User.objects.filter(profile__role=Role.STUDENT).select_related("profile").order_by("profile__name", "id")


def get_student(student_id) -> User:
    student = students().filter(pk=student_id).first()
    if student is None:
        raise NotFoundError("Student not found.")
    return student


def _record(att: Attendance) -> dict[str, Any]:
    return {"date": att.date, "status": att.status, "notes": att.notes}


def request_leave(student, notes: str | None = None, *, day: date | None = None) -> Attendance:
    day = day or timezone.localdate()
    existing = Attendance.objects.filter(student=student, date=day).first()
    if existing:
        raise ConflictError(f"You already have attendance status '{existing.status}' for today.")
    try:
        with transaction.atomic():
            return Attendance.objects.create(student=student, date=day, status=AttendanceStatus.EXCUSED, notes=notes)
    except IntegrityError as exc:
        raise ConflictError("Attendance for today is already recorded.") from exc


def mark_attendance(student_id, day: date, status: str, marker) -> Attendance:
    """Create or overwrite a student's status for `day`."""
    if status not in MARKABLE_STATUSES:
        raise ValidationError("Invalid status; use PRESENT or ABSENT.")
    student = get_student(student_id)
    record, _ = Attendance.objects.update_or_create(
        student=student, date=day, defaults={"status": status, "marked_by": marker}
    )
    return record


def weekly_recap(reference: date) -> dict[str, Any]:
    start, end = week_bounds(reference)
    by_student: dict[int, list[dict[str, Any]]] = {}
    for att in Attendance.objects.filter(date__range=(start, end)).order_by("date"):
        by_student.setdefault(att.student_id, []).append(_record(att))
    recap = [
        {"studentId": s.id, "name": display_name(s), "email": s.email, "records": by_student.get(s.id, [])}
        for s in students()
    ]
    return {"recap": recap, "startDate": start, "endDate": end}


def daily_recap(day: date) -> list[dict[str, Any]]:
    marks = {a.student_id: a for a in Attendance.objects.filter(date=day)}
    rows = []
    for s in students():
        att = marks.get(s.id)
        rows.append(
            {
                "id": s.id,
                "name": display_name(s),
                "email": s.email,
                "attendance": {"status": att.status, "notes": att.notes} if att else None,
            }
        )
    return rows


def student_history(student_id) -> tuple[User, list[Attendance]]:
    student = get_student(student_id)
    return student, list(Attendance.objects.filter(student=student).order_by("-date"))


def qr_check_in(student_id, marker, *, day: date | None = None) -> User:
    """Record PRESENT for today from a scanned student id."""
    if not student_id:
        raise ValidationError("Invalid student id.")
    student = get_student(student_id)
    day = day or timezone.localdate()
    try:
        with transaction.atomic():
            _, created = Attendance.objects.get_or_create(
                student=student, date=day, defaults={"status": AttendanceStatus.PRESENT, "marked_by": marker}
            )
    except IntegrityError:
        created = False
    if not created:
        raise ConflictError(f"Already checked in: {display_name(student)}")
    logger.info("QR check-in for student %s by %s", student.pk, marker.pk)
    return student
