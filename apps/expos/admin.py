from django.contrib import admin

from .models import (
    Attendee,
    Booth,
    Exhibitor,
    ExhibitorBookmark,
    Expo,
    Feedback,
    FeedbackResponse,
    Schedule,
    SessionFeedback,
    SessionRegistration,
)


class BoothInline(admin.TabularInline):
    model = Booth
    extra = 0
    fields = ["booth_number", "category", "status", "exhibitor", "price"]
    readonly_fields = ["status", "exhibitor"]
    show_change_link = True


class ScheduleInline(admin.TabularInline):
    model = Schedule
    extra = 0
    fields = ["title", "session_type", "date", "start_time", "end_time", "room"]
    readonly_fields = ["attendee_count"]
    show_change_link = True


class SessionRegistrationInline(admin.TabularInline):
    model = SessionRegistration
    extra = 0
    fields = ["attendee", "attended", "registered_at"]
    readonly_fields = ["attendee", "registered_at"]


@admin.register(Expo)
class ExpoAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "organizer",
        "status",
        "start_date",
        "city",
        "total_booths",
        "booked_booths",
        "exhibitors_count",
        "attendees_count",
        "counters_in_sync_display",
    ]
    list_filter = ["status", "category", "is_public", "start_date"]
    search_fields = ["title", "description", "city", "organizer__username"]
    readonly_fields = [
        "booked_booths",
        "exhibitors_count",
        "attendees_count",
        "created_at",
        "updated_at",
        "published_at",
    ]
    inlines = [BoothInline, ScheduleInline]
    actions = ["recompute_counters"]

    def counters_in_sync_display(self, obj):
        return obj.counters_in_sync

    counters_in_sync_display.short_description = "Counters in sync"
    counters_in_sync_display.boolean = True

    def recompute_counters(self, request, queryset):
        repaired = sum(1 for expo in queryset if expo.recompute_counters()["repaired"])
        self.message_user(request, f"{repaired} expos had their counters repaired.")

    recompute_counters.short_description = "Recompute counters for selected expos"


@admin.register(Booth)
class BoothAdmin(admin.ModelAdmin):
    list_display = [
        "booth_number",
        "expo",
        "category",
        "status",
        "exhibitor",
        "reserved_until",
        "price",
    ]
    list_filter = ["status", "category", "expo"]
    search_fields = ["booth_number", "expo__title", "exhibitor__company_name"]
    # Lifecycle fields only move through reserve / book / release.
    readonly_fields = ["status", "exhibitor", "reserved_until", "created_at", "updated_at"]


@admin.register(Exhibitor)
class ExhibitorAdmin(admin.ModelAdmin):
    list_display = [
        "company_name",
        "expo",
        "user",
        "application_status",
        "assigned_booth",
        "applied_at",
    ]
    list_filter = ["application_status", "industry", "expo"]
    search_fields = ["company_name", "user__username", "contact_email"]
    readonly_fields = [
        "application_status",
        "assigned_booth",
        "reviewed_by",
        "reviewed_at",
        "applied_at",
        "updated_at",
    ]


@admin.register(Attendee)
class AttendeeAdmin(admin.ModelAdmin):
    list_display = [
        "user",
        "expo",
        "ticket_type",
        "registration_status",
        "checked_in",
        "registered_at",
    ]
    list_filter = ["registration_status", "ticket_type", "checked_in", "expo"]
    search_fields = ["user__username", "user__email", "badge_number"]
    readonly_fields = ["checked_in", "check_in_time", "registered_at", "updated_at"]


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "expo",
        "session_type",
        "date",
        "start_time",
        "attendee_count",
        "max_attendees",
        "rating_average",
    ]
    list_filter = ["session_type", "status", "date", "expo"]
    search_fields = ["title", "description", "room"]
    readonly_fields = ["attendee_count", "rating_average", "rating_count"]
    inlines = [SessionRegistrationInline]


@admin.register(SessionFeedback)
class SessionFeedbackAdmin(admin.ModelAdmin):
    list_display = ["session", "user", "rating", "created_at"]
    list_filter = ["rating"]
    search_fields = ["session__title", "user__username", "comment"]


class FeedbackResponseInline(admin.TabularInline):
    model = FeedbackResponse
    extra = 0
    fields = ["responded_by", "message", "is_internal", "responded_at"]
    readonly_fields = ["responded_at"]


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = [
        "subject",
        "expo",
        "type",
        "priority",
        "status",
        "assigned_to",
        "escalated",
        "created_at",
    ]
    list_filter = ["status", "priority", "type", "escalated", "expo"]
    search_fields = ["subject", "message", "user__username"]
    readonly_fields = ["assigned_at", "resolved_at", "escalated_at", "created_at", "updated_at"]
    inlines = [FeedbackResponseInline]


@admin.register(ExhibitorBookmark)
class ExhibitorBookmarkAdmin(admin.ModelAdmin):
    list_display = ["attendee", "exhibitor", "bookmarked_at"]
    search_fields = ["attendee__user__username", "exhibitor__company_name"]
