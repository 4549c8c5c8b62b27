from __future__ import annotations

from rest_framework import serializers

from .models import Material


class MaterialSerializer(serializers.ModelSerializer):
    driveUrl = serializers.URLField(source="drive_url", max_length=500)
    thumbnailUrl = serializers.URLField(source="thumbnail_url", max_length=500, required=False, allow_null=True, allow_blank=True)
    authorName = serializers.CharField(source="author.profile.name", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Material
        fields = ("id", "title", "description", "driveUrl", "thumbnailUrl", "authorName", "createdAt")
        extra_kwargs = {"description": {"required": False, "allow_null": True, "allow_blank": True}}

    def validate_thumbnailUrl(self, value):
        return value or None
