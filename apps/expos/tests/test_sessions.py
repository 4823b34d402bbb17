"""
Tests for the session registration engine.
"""

from django.test import TestCase

from apps.common.exceptions import (
    CapacityError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)

from ..models import Attendee, Schedule, SessionFeedback, SessionRegistration
from .base import create_attendee, create_expo, create_session, create_user


class SessionRegistrationTests(TestCase):
    """Roster membership and capacity."""

    def setUp(self):
        self.organizer = create_user("organizer", role="organizer")
        self.expo = create_expo(self.organizer)
        self.session = create_session(self.expo, max_attendees=1)
        self.alice = create_user("alice")
        self.bob = create_user("bob")
        self.alice_attendee = create_attendee(self.alice, self.expo)
        create_attendee(self.bob, self.expo)

    def test_register_adds_roster_entry(self):
        """Test both views of the roster show the registration."""
        registration = self.session.register(self.alice)

        self.assertEqual(registration.user, self.alice)
        self.assertEqual(self.session.attendee_count, 1)
        self.assertTrue(self.session.attendees.filter(attendee__user=self.alice).exists())
        self.assertTrue(
            self.alice_attendee.session_registrations.filter(session=self.session).exists()
        )

    def test_one_seat_session(self):
        """Test the second registrant of a one-seat session hits capacity."""
        self.session.register(self.alice)

        with self.assertRaises(CapacityError):
            self.session.register(self.bob)

        self.session.refresh_from_db()
        self.assertEqual(self.session.attendee_count, 1)
        self.assertEqual(self.session.attendees.count(), 1)

    def test_capacity_holds_for_stale_instance(self):
        """Test a stale copy of the session still cannot overfill it."""
        stale = Schedule.objects.get(pk=self.session.pk)
        self.session.register(self.alice)

        with self.assertRaises(CapacityError):
            stale.register(self.bob)

    def test_register_twice_is_duplicate(self):
        """Test duplicate registration is a hard error."""
        Schedule.objects.filter(pk=self.session.pk).update(max_attendees=5)
        self.session.register(self.alice)

        with self.assertRaises(DuplicateError):
            self.session.register(self.alice)

        self.session.refresh_from_db()
        self.assertEqual(self.session.attendee_count, 1)

    def test_register_requires_expo_registration(self):
        """Test users must hold an active expo registration first."""
        outsider = create_user("outsider")

        with self.assertRaises(ValidationError):
            self.session.register(outsider)

    def test_cancelled_expo_registration_cannot_register(self):
        """Test cancelled expo registrations do not grant session access."""
        Attendee.objects.filter(pk=self.alice_attendee.pk).update(
            registration_status=Attendee.RegistrationStatus.CANCELLED
        )

        with self.assertRaises(ValidationError):
            self.session.register(self.alice)

    def test_register_when_not_required(self):
        """Test open sessions reject registration."""
        open_session = create_session(self.expo, registration_required=False)

        with self.assertRaises(ValidationError):
            open_session.register(self.alice)

    def test_unregister_is_idempotent(self):
        """Test unregistering twice succeeds and keeps counts consistent."""
        self.session.register(self.alice)

        self.assertTrue(self.session.unregister(self.alice))
        self.assertFalse(self.session.unregister(self.alice))

        self.session.refresh_from_db()
        self.assertEqual(self.session.attendee_count, 0)
        self.assertFalse(SessionRegistration.objects.filter(session=self.session).exists())

    def test_unregister_frees_seat(self):
        """Test a freed seat can be taken by someone else."""
        self.session.register(self.alice)
        self.session.unregister(self.alice)

        self.session.register(self.bob)

        self.assertEqual(self.session.attendee_count, 1)

    def test_mark_attendance(self):
        """Test attendance flips the shared flag."""
        self.session.register(self.alice)

        self.session.mark_attendance(self.alice.pk)

        registration = SessionRegistration.objects.get(session=self.session)
        self.assertTrue(registration.attended)

        self.session.mark_attendance(self.alice.pk, attended=False)
        registration.refresh_from_db()
        self.assertFalse(registration.attended)

    def test_mark_attendance_unknown_user(self):
        """Test marking a non-registrant is not found."""
        with self.assertRaises(NotFoundError):
            self.session.mark_attendance(self.bob.pk)

    def test_analytics(self):
        """Test session analytics rates."""
        Schedule.objects.filter(pk=self.session.pk).update(max_attendees=4)
        self.session.refresh_from_db()
        self.session.register(self.alice)
        self.session.register(self.bob)
        self.session.mark_attendance(self.alice.pk)

        analytics = self.session.analytics()

        self.assertEqual(analytics["total_registered"], 2)
        self.assertEqual(analytics["total_attended"], 1)
        self.assertEqual(analytics["attendance_rate"], 50.0)
        self.assertEqual(analytics["occupancy_rate"], 50.0)
        self.assertEqual(analytics["capacity"], 4)


class SessionFeedbackTests(TestCase):
    """Feedback upsert and rating aggregation."""

    def setUp(self):
        self.organizer = create_user("organizer", role="organizer")
        self.expo = create_expo(self.organizer)
        self.session = create_session(self.expo)
        self.alice = create_user("alice")
        self.bob = create_user("bob")
        for user in [self.alice, self.bob]:
            create_attendee(user, self.expo)
            self.session.register(user)
            self.session.mark_attendance(user.pk)

    def test_feedback_upsert_recomputes_average(self):
        """Test rating 3 then 5 from one user leaves a single row averaging 5."""
        self.session.submit_feedback(self.alice, 3)
        self.session.submit_feedback(self.alice, 5, "Even better on reflection")

        self.session.refresh_from_db()
        self.assertEqual(self.session.rating_average, 5.0)
        self.assertEqual(self.session.rating_count, 1)
        self.assertEqual(SessionFeedback.objects.filter(session=self.session).count(), 1)

    def test_average_over_users(self):
        """Test the average covers every user's feedback."""
        self.session.submit_feedback(self.alice, 4)
        self.session.submit_feedback(self.bob, 5)

        self.session.refresh_from_db()
        self.assertEqual(self.session.rating_average, 4.5)
        self.assertEqual(self.session.rating_count, 2)

    def test_rating_out_of_range(self):
        """Test ratings outside 1-5 are rejected."""
        with self.assertRaises(ValidationError):
            self.session.submit_feedback(self.alice, 6)
        with self.assertRaises(ValidationError):
            self.session.submit_feedback(self.alice, 0)

    def test_feedback_requires_attendance(self):
        """Test registrants who did not attend cannot leave feedback."""
        self.session.mark_attendance(self.bob.pk, attended=False)

        with self.assertRaises(ValidationError):
            self.session.submit_feedback(self.bob, 4)
