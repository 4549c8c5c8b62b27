"""Attendance endpoints."""
from __future__ import annotations

from django.http import HttpResponse
from django.utils import timezone
from django.utils.text import slugify
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import display_name
from api.permissions import IsStaffRole, IsStudent
from . import exports, utils
from .serializers import AttendanceSerializer, CheckInSerializer, LeaveRequestSerializer, MarkAttendanceSerializer


def _xlsx_response(content: bytes, filename: str) -> HttpResponse:
    response = HttpResponse(content, content_type=exports.XLSX_CONTENT_TYPE)
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


def _reference_day(request):
    raw = request.query_params.get("weekStartDate")
    return utils.parse_day(raw, "weekStartDate") if raw else timezone.localdate()


class RequestLeaveView(APIView):
    permission_classes = [IsStudent]

    def post(self, request):
        ser = LeaveRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = utils.request_leave(request.user, ser.validated_data.get("notes"))
        return Response(
            {"message": "Leave request recorded.", "data": AttendanceSerializer(record).data},
            status=status.HTTP_201_CREATED,
        )


class MarkAttendanceView(APIView):
    permission_classes = [IsStaffRole]

    def post(self, request):
        ser = MarkAttendanceSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        record = utils.mark_attendance(data["studentId"], data["date"], data["status"], request.user)
        return Response({"message": "Attendance marked.", "data": AttendanceSerializer(record).data})


class WeeklyRecapView(APIView):
    permission_classes = [IsStaffRole]

    def get(self, request):
        return Response({"data": utils.weekly_recap(_reference_day(request))})


class WeeklyRecapExportView(APIView):
    permission_classes = [IsStaffRole]

    def get(self, request):
        recap = utils.weekly_recap(_reference_day(request))
        filename = f"weekly-attendance-{recap['startDate'].isoformat()}.xlsx"
        return _xlsx_response(exports.weekly_recap_workbook(recap), filename)


class DailyRecapView(APIView):
    permission_classes = [IsStaffRole]

    def get(self, request):
        day = utils.parse_day(request.query_params.get("date"), "date")
        return Response({"data": utils.daily_recap(day)})


class StudentHistoryView(APIView):
    permission_classes = [IsStaffRole]

    def get(self, request, student_id: int):
        student, history = utils.student_history(student_id)
        return Response(
            {
                "data": {
                    "student": {"id": student.id, "name": display_name(student), "email": student.email},
                    "history": AttendanceSerializer(history, many=True).data,
                }
            }
        )


class StudentHistoryExportView(APIView):
    permission_classes = [IsStaffRole]

    def get(self, request, student_id: int):
        student, history = utils.student_history(student_id)
        filename = f"attendance-history-{slugify(display_name(student)) or student.id}.xlsx"
        return _xlsx_response(exports.student_history_workbook(history), filename)


class QrCheckInView(APIView):
    permission_classes = [IsStaffRole]

    def post(self, request):
        ser = CheckInSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        student = utils.qr_check_in(ser.validated_data["studentId"], request.user)
        return Response({"message": f"Checked in: {display_name(student)}"}, status=status.HTTP_201_CREATED)
