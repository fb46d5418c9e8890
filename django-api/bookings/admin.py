from django.contrib import admin

from bookings.models import Member, Occurrence


@admin.register(Occurrence)
class OccurrenceAdmin(admin.ModelAdmin):
    list_display = ["name", "event_date", "location", "version", "updated_at"]
    search_fields = ["name", "location"]
    readonly_fields = ["event_date", "version", "created_at", "updated_at"]


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "level"]
    list_filter = ["level"]
    search_fields = ["name", "email"]
