"""
Tests for the expo counters and their reconciliation.
"""

from unittest.mock import patch

from django.test import TestCase

from apps.common.exceptions import ConflictError, PartialFailureError

from ..models import Attendee, Booth, Exhibitor, Expo, Schedule, SessionRegistration
from .base import (
    create_attendee,
    create_booth,
    create_exhibitor,
    create_expo,
    create_session,
    create_user,
)


class CounterTests(TestCase):
    """The counters move with the state transitions that own them."""

    def setUp(self):
        self.organizer = create_user("organizer", role="organizer")
        self.expo = create_expo(self.organizer)

    def test_approval_increments_once(self):
        """Test approving the same exhibitor twice counts it once."""
        exhibitor = create_exhibitor(
            create_user("acme", role="exhibitor"), self.expo, approved=False
        )

        self.assertTrue(exhibitor.review(self.organizer, Exhibitor.ApplicationStatus.APPROVED))
        self.assertFalse(exhibitor.review(self.organizer, Exhibitor.ApplicationStatus.APPROVED))

        self.expo.refresh_from_db()
        exhibitor.refresh_from_db()
        self.assertEqual(self.expo.exhibitors_count, 1)
        self.assertEqual(exhibitor.reviewed_by, self.organizer)
        self.assertIsNotNone(exhibitor.reviewed_at)

    def test_rejection_does_not_count(self):
        """Test non-approval reviews leave the counter alone."""
        exhibitor = create_exhibitor(
            create_user("acme", role="exhibitor"), self.expo, approved=False
        )

        exhibitor.review(self.organizer, Exhibitor.ApplicationStatus.REJECTED, "No fit")

        self.expo.refresh_from_db()
        self.assertEqual(self.expo.exhibitors_count, 0)
        self.assertEqual(exhibitor.review_notes, "No fit")

    def test_exhibitor_with_booth_cannot_be_rejected(self):
        """Test an approved exhibitor holding a booth keeps its approval."""
        exhibitor = create_exhibitor(create_user("acme", role="exhibitor"), self.expo)
        create_booth(self.expo).book(exhibitor)

        with self.assertRaises(ConflictError):
            exhibitor.review(self.organizer, Exhibitor.ApplicationStatus.REJECTED)

        exhibitor.refresh_from_db()
        self.assertEqual(exhibitor.application_status, Exhibitor.ApplicationStatus.APPROVED)

    def test_attendee_registration_counts(self):
        """Test each expo registration increments the attendee counter."""
        create_attendee(create_user("alice"), self.expo)
        create_attendee(create_user("bob"), self.expo)

        self.expo.refresh_from_db()
        self.assertEqual(self.expo.attendees_count, 2)
        self.assertTrue(self.expo.counters_in_sync)

    def test_sync_check_reads_stored_counters(self):
        """Test an instance loaded before the transitions still reports sync."""
        exhibitor = create_exhibitor(create_user("acme", role="exhibitor"), self.expo)
        create_booth(self.expo).book(exhibitor)
        create_attendee(create_user("alice"), self.expo)

        self.assertEqual(self.expo.booked_booths, 0)
        self.assertTrue(self.expo.counters_in_sync)

        Expo.objects.filter(pk=self.expo.pk).update(attendees_count=4)
        self.assertFalse(self.expo.counters_in_sync)

    def test_booked_booths_never_exceed_total(self):
        """Test the booked counter cannot pass the booth ceiling."""
        self.expo.total_booths = 1
        self.expo.save()
        first = create_booth(self.expo, "A1")
        first.book(create_exhibitor(create_user("acme", role="exhibitor"), self.expo))

        self.expo.refresh_from_db()
        self.assertEqual(self.expo.booked_booths, 1)
        self.assertEqual(self.expo.available_booths, 0)


class PartialFailureTests(TestCase):
    """A failed side effect after a committed booth write."""

    def setUp(self):
        self.organizer = create_user("organizer", role="organizer")
        self.expo = create_expo(self.organizer, total_booths=2)
        self.booth = create_booth(self.expo)
        self.exhibitor = create_exhibitor(
            create_user("acme", role="exhibitor"), self.expo
        )

    def test_counter_failure_reports_partial_failure(self):
        """Test the booth stays booked and the error names the reconciliation."""
        Expo.objects.filter(pk=self.expo.pk).update(booked_booths=2)

        with self.assertRaises(PartialFailureError) as ctx:
            self.booth.book(self.exhibitor)

        context = ctx.exception.context
        self.assertEqual(context["operation"], "book")
        self.assertEqual(context["booth"], str(self.booth.pk))
        self.assertEqual(context["committed"], ["booth.status=booked"])
        self.assertEqual(context["reconcile"], f"/expos/{self.expo.pk}/recompute-counters/")

        self.booth.refresh_from_db()
        self.exhibitor.refresh_from_db()
        self.assertEqual(self.booth.status, Booth.Status.BOOKED)
        self.assertIsNone(self.exhibitor.assigned_booth)

    def test_partial_failure_is_repaired_by_reconciliation(self):
        """Test recompute_counters fixes the counter and the missing link."""
        Expo.objects.filter(pk=self.expo.pk).update(booked_booths=2)
        with self.assertRaises(PartialFailureError):
            self.booth.book(self.exhibitor)

        report = Expo.objects.get(pk=self.expo.pk).recompute_counters()

        self.assertTrue(report["repaired"])
        self.assertEqual(report["drift"]["booked_booths"], {"stored": 2, "actual": 1})
        self.assertEqual(report["links"][0]["fix"], "link")

        self.expo.refresh_from_db()
        self.exhibitor.refresh_from_db()
        self.assertEqual(self.expo.booked_booths, 1)
        self.assertEqual(self.exhibitor.assigned_booth, self.booth)
        self.assertTrue(self.expo.counters_in_sync)

    def test_release_counter_failure_keeps_booth_available(self):
        """Test a release whose decrement fails still frees the booth."""
        self.booth.book(self.exhibitor)
        Expo.objects.filter(pk=self.expo.pk).update(booked_booths=0)

        with self.assertRaises(PartialFailureError) as ctx:
            self.booth.release()

        self.assertEqual(ctx.exception.context["operation"], "release")
        self.booth.refresh_from_db()
        self.assertEqual(self.booth.status, Booth.Status.AVAILABLE)

    def test_partial_failure_is_logged_critical(self):
        """Test the partial failure is logged at CRITICAL with its context."""
        Expo.objects.filter(pk=self.expo.pk).update(booked_booths=2)

        with patch("apps.expos.models.logger") as mock_logger:
            with self.assertRaises(PartialFailureError):
                self.booth.book(self.exhibitor)

        mock_logger.critical.assert_called_once()
        self.assertEqual(
            mock_logger.critical.call_args.kwargs["extra"]["operation"], "book"
        )


class RecomputeCountersTests(TestCase):
    """Reconciliation from full scans."""

    def setUp(self):
        self.organizer = create_user("organizer", role="organizer")
        self.expo = create_expo(self.organizer)
        self.exhibitor = create_exhibitor(create_user("acme", role="exhibitor"), self.expo)
        self.booth = create_booth(self.expo)
        self.booth.book(self.exhibitor)
        self.attendee_user = create_user("alice")
        self.attendee = create_attendee(self.attendee_user, self.expo)
        self.session = create_session(self.expo)
        self.session.register(self.attendee_user)

    def test_in_sync_expo_reports_no_drift(self):
        """Test a consistent expo produces an empty report."""
        report = self.expo.recompute_counters()

        self.assertEqual(report["drift"], {})
        self.assertEqual(report["sessions"], [])
        self.assertEqual(report["links"], [])
        self.assertFalse(report["repaired"])
        self.assertEqual(
            report["counters"],
            {"booked_booths": 1, "exhibitors_count": 1, "attendees_count": 1},
        )

    def test_repairs_corrupted_counters(self):
        """Test manually corrupted counters are rebuilt and reported."""
        Expo.objects.filter(pk=self.expo.pk).update(
            booked_booths=7, exhibitors_count=0, attendees_count=3
        )
        Schedule.objects.filter(pk=self.session.pk).update(attendee_count=9)

        report = Expo.objects.get(pk=self.expo.pk).recompute_counters()

        self.assertEqual(set(report["drift"]), {"booked_booths", "exhibitors_count", "attendees_count"})
        self.assertEqual(report["sessions"][0]["stored"], 9)
        self.assertEqual(report["sessions"][0]["actual"], 1)

        self.expo.refresh_from_db()
        self.session.refresh_from_db()
        self.assertEqual(self.expo.booked_booths, 1)
        self.assertEqual(self.expo.exhibitors_count, 1)
        self.assertEqual(self.expo.attendees_count, 1)
        self.assertEqual(self.session.attendee_count, 1)

    def test_dry_run_reports_without_writing(self):
        """Test commit=False leaves the stored counters untouched."""
        Expo.objects.filter(pk=self.expo.pk).update(booked_booths=5)

        report = Expo.objects.get(pk=self.expo.pk).recompute_counters(commit=False)

        self.assertFalse(report["repaired"])
        self.assertEqual(report["drift"]["booked_booths"]["stored"], 5)
        self.expo.refresh_from_db()
        self.assertEqual(self.expo.booked_booths, 5)

    def test_unlinks_stale_assignment(self):
        """Test an assigned booth that is no longer booked is unlinked."""
        Booth.objects.filter(pk=self.booth.pk).update(
            status=Booth.Status.AVAILABLE, exhibitor=None
        )

        report = Expo.objects.get(pk=self.expo.pk).recompute_counters()

        self.assertIn("unlink", [link["fix"] for link in report["links"]])
        self.exhibitor.refresh_from_db()
        self.assertIsNone(self.exhibitor.assigned_booth)

    def test_cancelled_attendees_are_not_counted(self):
        """Test cancelled registrations drop out of the attendee count."""
        Attendee.objects.filter(pk=self.attendee.pk).update(
            registration_status=Attendee.RegistrationStatus.CANCELLED
        )

        report = Expo.objects.get(pk=self.expo.pk).recompute_counters()

        self.assertEqual(report["counters"]["attendees_count"], 0)

    def test_session_count_matches_roster(self):
        """Test the session counter is rebuilt from roster rows."""
        SessionRegistration.objects.filter(session=self.session).delete()

        self.expo.recompute_counters()

        self.session.refresh_from_db()
        self.assertEqual(self.session.attendee_count, 0)
