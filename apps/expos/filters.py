from django.db.models import F
from django.utils import timezone
from django_filters import rest_framework as django_filters

from .models import Attendee, Booth, Exhibitor, Expo, Feedback, Schedule


class ExpoFilter(django_filters.FilterSet):
    """Filtering for expos."""

    title = django_filters.CharFilter(lookup_expr="icontains")
    status = django_filters.MultipleChoiceFilter(choices=Expo.Status.choices)
    category = django_filters.ChoiceFilter(choices=Expo.Category.choices)
    city = django_filters.CharFilter(lookup_expr="icontains")
    country = django_filters.CharFilter(lookup_expr="icontains")
    start_date_after = django_filters.DateTimeFilter(
        field_name="start_date", lookup_expr="gte"
    )
    start_date_before = django_filters.DateTimeFilter(
        field_name="start_date", lookup_expr="lte"
    )
    registration_open = django_filters.BooleanFilter(method="filter_registration_open")

    class Meta:
        model = Expo
        fields = [
            "title",
            "status",
            "category",
            "city",
            "country",
            "start_date_after",
            "start_date_before",
            "registration_open",
        ]

    def filter_registration_open(self, queryset, name, value):
        """Filter expos by whether registration is currently open."""
        now = timezone.now()
        if value is True:
            return queryset.filter(
                status=Expo.Status.PUBLISHED, registration_deadline__gt=now
            )
        elif value is False:
            return queryset.exclude(
                status=Expo.Status.PUBLISHED, registration_deadline__gt=now
            )
        return queryset


class BoothFilter(django_filters.FilterSet):
    """Filtering for booths; ``available`` honours expired reservations."""

    expo = django_filters.UUIDFilter(field_name="expo_id")
    status = django_filters.ChoiceFilter(choices=Booth.Status.choices)
    category = django_filters.ChoiceFilter(choices=Booth.Category.choices)
    available = django_filters.BooleanFilter(method="filter_available")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Booth
        fields = ["expo", "status", "category", "available", "min_price", "max_price"]

    def filter_available(self, queryset, name, value):
        available = queryset.available()
        if value is True:
            return available
        elif value is False:
            return queryset.exclude(pk__in=available.values("pk"))
        return queryset


class ExhibitorFilter(django_filters.FilterSet):
    expo = django_filters.UUIDFilter(field_name="expo_id")
    application_status = django_filters.ChoiceFilter(
        choices=Exhibitor.ApplicationStatus.choices
    )
    industry = django_filters.ChoiceFilter(choices=Exhibitor.Industry.choices)
    company_name = django_filters.CharFilter(lookup_expr="icontains")
    has_booth = django_filters.BooleanFilter(
        field_name="assigned_booth", lookup_expr="isnull", exclude=True
    )

    class Meta:
        model = Exhibitor
        fields = ["expo", "application_status", "industry", "company_name", "has_booth"]


class AttendeeFilter(django_filters.FilterSet):
    expo = django_filters.UUIDFilter(field_name="expo_id")
    registration_status = django_filters.ChoiceFilter(
        choices=Attendee.RegistrationStatus.choices
    )
    ticket_type = django_filters.ChoiceFilter(choices=Attendee.TicketType.choices)
    checked_in = django_filters.BooleanFilter()

    class Meta:
        model = Attendee
        fields = ["expo", "registration_status", "ticket_type", "checked_in"]


class ScheduleFilter(django_filters.FilterSet):
    """Filtering for sessions, including a single-day ``date`` filter."""

    expo = django_filters.UUIDFilter(field_name="expo_id")
    date = django_filters.DateFilter()
    session_type = django_filters.ChoiceFilter(choices=Schedule.SessionType.choices)
    status = django_filters.ChoiceFilter(choices=Schedule.Status.choices)
    has_capacity = django_filters.BooleanFilter(method="filter_has_capacity")

    class Meta:
        model = Schedule
        fields = ["expo", "date", "session_type", "status", "has_capacity"]

    def filter_has_capacity(self, queryset, name, value):
        if value is True:
            return queryset.filter(attendee_count__lt=F("max_attendees"))
        elif value is False:
            return queryset.filter(attendee_count__gte=F("max_attendees"))
        return queryset


class FeedbackFilter(django_filters.FilterSet):
    expo = django_filters.UUIDFilter(field_name="expo_id")
    type = django_filters.ChoiceFilter(choices=Feedback.Type.choices)
    status = django_filters.MultipleChoiceFilter(choices=Feedback.Status.choices)
    priority = django_filters.ChoiceFilter(choices=Feedback.Priority.choices)
    assigned_to = django_filters.NumberFilter(field_name="assigned_to_id")
    escalated = django_filters.BooleanFilter()

    class Meta:
        model = Feedback
        fields = ["expo", "type", "status", "priority", "assigned_to", "escalated"]
