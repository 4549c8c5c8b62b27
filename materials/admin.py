from django.contrib import admin

from .models import Material


@admin.register(Material)
class MaterialAdmin(admin.ModelAdmin):
    list_display = ("title", "author", "drive_url", "created_at")
    search_fields = ("title", "author__email")
