"""
Shared fixtures for the expos test suites.
"""

from datetime import time, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from ..models import Attendee, Booth, Exhibitor, Expo, Schedule

User = get_user_model()


def create_user(username, role=User.Role.ATTENDEE, **extra):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="testpass123",
        role=role,
        **extra,
    )


def create_expo(organizer, **overrides):
    now = timezone.now()
    data = {
        "title": "Tech Expo",
        "description": "Yearly technology expo",
        "organizer": organizer,
        "status": Expo.Status.PUBLISHED,
        "start_date": now + timedelta(days=30),
        "end_date": now + timedelta(days=32),
        "registration_deadline": now + timedelta(days=20),
        "venue": "Convention Center",
        "city": "Berlin",
        "country": "Germany",
        "max_capacity": 500,
        "total_booths": 10,
    }
    data.update(overrides)
    return Expo.objects.create(**data)


def create_booth(expo, booth_number="A1", **overrides):
    data = {
        "width": 3,
        "height": 3,
        "price": Decimal("1500.00"),
    }
    data.update(overrides)
    return Booth.objects.create(expo=expo, booth_number=booth_number, **data)


def create_exhibitor(user, expo, approved=True, **overrides):
    data = {
        "company_name": f"{user.username} Inc",
        "contact_name": user.username,
        "contact_email": user.email,
        "contact_phone": "+4930123456",
    }
    data.update(overrides)
    exhibitor = Exhibitor.objects.create(user=user, expo=expo, **data)
    if approved:
        exhibitor.review(expo.organizer, Exhibitor.ApplicationStatus.APPROVED)
    return exhibitor


def create_attendee(user, expo, **data):
    return Attendee.register(user, expo, **data)


def create_session(expo, **overrides):
    data = {
        "title": "Opening Keynote",
        "description": "Welcome and roadmap",
        "session_type": Schedule.SessionType.KEYNOTE,
        "date": (timezone.now() + timedelta(days=30)).date(),
        "start_time": time(9, 0),
        "end_time": time(10, 0),
        "room": "Hall A",
        "max_attendees": 50,
    }
    data.update(overrides)
    return Schedule.objects.create(expo=expo, **data)
