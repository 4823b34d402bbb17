from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AttendeeViewSet,
    BoothViewSet,
    ExhibitorViewSet,
    ExpoViewSet,
    FeedbackViewSet,
    ScheduleViewSet,
)

app_name = "expos"

router = DefaultRouter()
router.register(r"expos", ExpoViewSet, basename="expo")
router.register(r"booths", BoothViewSet, basename="booth")
router.register(r"exhibitors", ExhibitorViewSet, basename="exhibitor")
router.register(r"attendees", AttendeeViewSet, basename="attendee")
router.register(r"schedules", ScheduleViewSet, basename="schedule")
router.register(r"feedback", FeedbackViewSet, basename="feedback")

urlpatterns = [
    path("", include(router.urls)),
]
