"""Learning materials.

A `Material` points at externally hosted content (typically a shared
drive link) with an optional thumbnail; nothing is uploaded here.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Material(models.Model):
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="materials")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    drive_url = models.URLField(max_length=500)
    thumbnail_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover
        return self.title
