from __future__ import annotations

from rest_framework import serializers

from .models import Attendance, AttendanceStatus


class AttendanceSerializer(serializers.ModelSerializer):
    studentId = serializers.IntegerField(source="student_id", read_only=True)
    markedById = serializers.IntegerField(source="marked_by_id", read_only=True)

    class Meta:
        model = Attendance
        fields = ("id", "studentId", "date", "status", "notes", "markedById")


class LeaveRequestSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class MarkAttendanceSerializer(serializers.Serializer):
    studentId = serializers.IntegerField()
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=[AttendanceStatus.PRESENT, AttendanceStatus.ABSENT])


class CheckInSerializer(serializers.Serializer):
    studentId = serializers.IntegerField()
