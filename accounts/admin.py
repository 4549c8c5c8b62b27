from django.contrib import admin

from .models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "name", "role", "created_at")
    list_filter = ("role",)
    search_fields = ("user__email", "name")
