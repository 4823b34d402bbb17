"""
Tests for expo feedback, exhibitor bookmarks and per-record analytics.
"""

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from apps.common.exceptions import ConflictError, DuplicateError, ValidationError

from ..models import ExhibitorBookmark, Feedback, FeedbackResponse
from .base import (
    create_attendee,
    create_booth,
    create_exhibitor,
    create_expo,
    create_session,
    create_user,
)


def create_feedback(user, expo, **overrides):
    data = {
        "type": Feedback.Type.GENERAL,
        "subject": "Wifi in hall B",
        "message": "The wifi drops every few minutes.",
    }
    data.update(overrides)
    return Feedback.objects.create(user=user, expo=expo, **data)


class FeedbackModelTests(TestCase):
    def setUp(self):
        self.organizer = create_user("organizer", role="organizer")
        self.staff = create_user("staff", role="organizer")
        self.attendee_user = create_user("alice")
        self.expo = create_expo(self.organizer)
        self.feedback = create_feedback(self.attendee_user, self.expo)

    def test_defaults(self):
        """Test new feedback is open with medium priority."""
        self.assertEqual(self.feedback.status, Feedback.Status.OPEN)
        self.assertEqual(self.feedback.priority, Feedback.Priority.MEDIUM)
        self.assertFalse(self.feedback.is_resolved)
        self.assertEqual(self.feedback.response_count, 0)

    def test_assign_moves_to_in_progress(self):
        self.feedback.assign(self.staff)

        self.feedback.refresh_from_db()
        self.assertEqual(self.feedback.assigned_to, self.staff)
        self.assertIsNotNone(self.feedback.assigned_at)
        self.assertEqual(self.feedback.status, Feedback.Status.IN_PROGRESS)

    def test_first_response_opens_handling(self):
        """Test a response on open feedback moves it to in progress."""
        response = self.feedback.respond(self.organizer, "Looking into it", is_internal=True)

        self.feedback.refresh_from_db()
        self.assertEqual(self.feedback.status, Feedback.Status.IN_PROGRESS)
        self.assertTrue(response.is_internal)
        self.assertEqual(self.feedback.response_count, 1)

    def test_resolve(self):
        self.feedback.resolve(self.organizer, "Access point replaced")

        self.feedback.refresh_from_db()
        self.assertEqual(self.feedback.status, Feedback.Status.RESOLVED)
        self.assertEqual(self.feedback.resolved_by, self.organizer)
        self.assertEqual(self.feedback.resolution, "Access point replaced")
        self.assertTrue(self.feedback.is_resolved)

    def test_escalate_raises_priority(self):
        """Test escalation flags the feedback, sets urgent and hands it over."""
        self.feedback.escalate(self.staff)

        self.feedback.refresh_from_db()
        self.assertTrue(self.feedback.escalated)
        self.assertIsNotNone(self.feedback.escalated_at)
        self.assertEqual(self.feedback.escalated_to, self.staff)
        self.assertEqual(self.feedback.priority, Feedback.Priority.URGENT)
        self.assertTrue(self.feedback.needs_attention)

    def test_closed_feedback_rejects_handling(self):
        """Test resolved feedback cannot be assigned, resolved or escalated again."""
        self.feedback.resolve(self.organizer)

        with self.assertRaises(ConflictError):
            self.feedback.assign(self.staff)
        with self.assertRaises(ConflictError):
            self.feedback.resolve(self.organizer)
        with self.assertRaises(ConflictError):
            self.feedback.escalate()

    def test_plain_save_keeps_handling_fields(self):
        """Test a content save on a stale copy does not reopen resolved feedback."""
        stale = Feedback.objects.get(pk=self.feedback.pk)
        self.feedback.resolve(self.organizer)

        stale.subject = "Wifi in hall C"
        stale.save()

        self.feedback.refresh_from_db()
        self.assertEqual(self.feedback.subject, "Wifi in hall C")
        self.assertEqual(self.feedback.status, Feedback.Status.RESOLVED)

    def test_analytics_for_expo(self):
        create_feedback(
            self.attendee_user,
            self.expo,
            type=Feedback.Type.COMPLAINT,
            rating=2,
            priority=Feedback.Priority.HIGH,
        )
        create_feedback(self.attendee_user, self.expo, rating=4)
        self.feedback.resolve(self.organizer)
        create_feedback(self.attendee_user, create_expo(self.organizer, title="Other"))

        analytics = Feedback.analytics_for(self.expo)

        self.assertEqual(analytics["total"], 3)
        self.assertEqual(analytics["by_status"], {"open": 2, "resolved": 1})
        self.assertEqual(analytics["by_type"], {"general": 2, "complaint": 1})
        self.assertEqual(analytics["by_priority"], {"medium": 2, "high": 1})
        self.assertEqual(analytics["average_rating"], 3)
        self.assertGreaterEqual(analytics["average_response_time_hours"], 0)


class BookmarkModelTests(TestCase):
    def setUp(self):
        self.organizer = create_user("organizer", role="organizer")
        self.expo = create_expo(self.organizer)
        self.exhibitor = create_exhibitor(create_user("acme", role="exhibitor"), self.expo)
        self.attendee = create_attendee(create_user("alice"), self.expo)

    def test_bookmark_exhibitor(self):
        bookmark = self.attendee.bookmark_exhibitor(self.exhibitor)

        self.assertEqual(bookmark.exhibitor, self.exhibitor)
        self.assertEqual(self.attendee.bookmarks.count(), 1)

    def test_duplicate_bookmark_is_rejected(self):
        self.attendee.bookmark_exhibitor(self.exhibitor)

        with self.assertRaises(DuplicateError):
            self.attendee.bookmark_exhibitor(self.exhibitor)
        self.assertEqual(ExhibitorBookmark.objects.count(), 1)

    def test_exhibitor_of_other_expo_is_rejected(self):
        other_expo = create_expo(self.organizer, title="Other Expo")
        outsider = create_exhibitor(create_user("outsider", role="exhibitor"), other_expo)

        with self.assertRaises(ValidationError):
            self.attendee.bookmark_exhibitor(outsider)
        self.assertFalse(ExhibitorBookmark.objects.exists())


class RecordAnalyticsTests(TestCase):
    """Analytics for a single attendee registration or exhibitor."""

    def setUp(self):
        self.organizer = create_user("organizer", role="organizer")
        self.expo = create_expo(self.organizer)
        self.exhibitor = create_exhibitor(
            create_user("acme", role="exhibitor"),
            self.expo,
            products_services=[{"name": "Router"}, {"name": "Switch"}],
        )
        self.attendee_user = create_user("alice")
        self.attendee = create_attendee(self.attendee_user, self.expo)

    def test_attendee_analytics(self):
        session = create_session(self.expo)
        session.register(self.attendee_user)
        self.attendee.bookmark_exhibitor(self.exhibitor)
        create_feedback(self.attendee_user, self.expo)
        create_feedback(self.attendee_user, create_expo(self.organizer, title="Other"))

        analytics = self.attendee.analytics()

        self.assertFalse(analytics["checked_in"])
        self.assertEqual(analytics["session_registrations"], 1)
        self.assertEqual(analytics["sessions_attended"], 0)
        self.assertEqual(analytics["bookmarked_exhibitors"], 1)
        self.assertEqual(analytics["session_feedback_submitted"], 0)
        self.assertEqual(analytics["feedback_submitted"], 1)

    def test_exhibitor_analytics(self):
        booth = create_booth(self.expo, "A1")
        booth.book(self.exhibitor)
        self.attendee.bookmark_exhibitor(self.exhibitor)
        self.exhibitor.refresh_from_db()

        analytics = self.exhibitor.analytics()

        self.assertEqual(analytics["booth_number"], "A1")
        self.assertEqual(analytics["bookmarks"], 1)
        self.assertEqual(analytics["products_count"], 2)
        self.assertEqual(analytics["staff_count"], 0)

    def test_exhibitor_without_booth(self):
        analytics = self.exhibitor.analytics()

        self.assertIsNone(analytics["booth_number"])
        self.assertEqual(analytics["booth_visits"], 0)


class FeedbackViewTests(APITestCase):
    def setUp(self):
        self.client = APIClient()

        self.organizer = create_user("organizer", role="organizer")
        self.staff = create_user("staff", role="organizer")
        self.attendee_user = create_user("alice")
        self.other_user = create_user("bob")

        self.expo = create_expo(self.organizer)
        self.session = create_session(self.expo)
        self.feedback = create_feedback(self.attendee_user, self.expo)

    def test_submit_feedback(self):
        self.client.force_authenticate(user=self.attendee_user)
        data = {
            "expo": str(self.expo.pk),
            "type": Feedback.Type.SESSION,
            "subject": "Keynote audio",
            "message": "The microphone was too quiet.",
            "rating": 3,
            "related_entity_type": Feedback.EntityType.SESSION,
            "related_entity_id": str(self.session.pk),
        }

        response = self.client.post(reverse("expos:feedback-list"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "Feedback submitted successfully")
        self.assertEqual(response.data["data"]["status"], Feedback.Status.OPEN)
        self.assertEqual(response.data["data"]["user"]["username"], "alice")

    def test_submit_rejects_entity_outside_expo(self):
        """Test the related entity must exist in the same expo."""
        other_session = create_session(create_expo(self.organizer, title="Other"))
        self.client.force_authenticate(user=self.attendee_user)
        data = {
            "expo": str(self.expo.pk),
            "type": Feedback.Type.SESSION,
            "subject": "Wrong room",
            "message": "Room was locked.",
            "related_entity_type": Feedback.EntityType.SESSION,
            "related_entity_id": str(other_session.pk),
        }

        response = self.client.post(reverse("expos:feedback-list"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "ValidationError")
        self.assertIn("related_entity_id", response.data["errors"])

    def test_mine_lists_own_feedback(self):
        create_feedback(self.other_user, self.expo, subject="Parking")
        self.client.force_authenticate(user=self.attendee_user)

        response = self.client.get(reverse("expos:feedback-mine"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [item["subject"] for item in response.data["data"]], ["Wifi in hall B"]
        )

    def test_other_users_cannot_see_feedback(self):
        self.client.force_authenticate(user=self.other_user)

        response = self.client.get(
            reverse("expos:feedback-detail", kwargs={"pk": self.feedback.pk})
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_manager_lists_expo_feedback(self):
        create_feedback(self.other_user, self.expo, subject="Parking")
        self.client.force_authenticate(user=self.organizer)

        response = self.client.get(
            reverse("expos:feedback-list"), {"expo": str(self.expo.pk)}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["data"]), 2)

    def test_owner_cannot_update_resolved_feedback(self):
        self.feedback.resolve(self.organizer)
        self.client.force_authenticate(user=self.attendee_user)

        response = self.client.patch(
            reverse("expos:feedback-detail", kwargs={"pk": self.feedback.pk}),
            {"message": "Still broken"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Cannot update resolved feedback.")

    def test_owner_updates_open_feedback(self):
        self.client.force_authenticate(user=self.attendee_user)

        response = self.client.patch(
            reverse("expos:feedback-detail", kwargs={"pk": self.feedback.pk}),
            {"priority": Feedback.Priority.HIGH},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.feedback.refresh_from_db()
        self.assertEqual(self.feedback.priority, Feedback.Priority.HIGH)

    def test_assign_requires_expo_manager(self):
        self.client.force_authenticate(user=self.attendee_user)

        response = self.client.post(
            reverse("expos:feedback-assign", kwargs={"pk": self.feedback.pk}),
            {"assigned_to": self.staff.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "AccessDeniedError")

    def test_assignee_can_respond_and_resolve(self):
        """Test an assigned user handles feedback of an expo they do not manage."""
        self.client.force_authenticate(user=self.organizer)
        response = self.client.post(
            reverse("expos:feedback-assign", kwargs={"pk": self.feedback.pk}),
            {"assigned_to": self.staff.pk},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["status"], Feedback.Status.IN_PROGRESS)

        self.client.force_authenticate(user=self.staff)
        response = self.client.post(
            reverse("expos:feedback-respond", kwargs={"pk": self.feedback.pk}),
            {"message": "Technician is on the way"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Response added successfully")

        response = self.client.post(
            reverse("expos:feedback-resolve", kwargs={"pk": self.feedback.pk}),
            {"resolution": "Access point replaced"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["data"]["is_resolved"])

    def test_unrelated_user_cannot_respond(self):
        self.client.force_authenticate(user=self.other_user)

        response = self.client.post(
            reverse("expos:feedback-respond", kwargs={"pk": self.feedback.pk}),
            {"message": "Me too"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(FeedbackResponse.objects.exists())

    def test_internal_responses_hidden_from_author(self):
        self.feedback.respond(self.organizer, "Vendor contract issue", is_internal=True)
        self.feedback.respond(self.organizer, "We are on it")
        self.client.force_authenticate(user=self.attendee_user)

        response = self.client.get(
            reverse("expos:feedback-detail", kwargs={"pk": self.feedback.pk})
        )

        self.assertEqual(
            [item["message"] for item in response.data["data"]["responses"]],
            ["We are on it"],
        )

    def test_anonymous_feedback_hides_author_from_managers(self):
        Feedback.objects.filter(pk=self.feedback.pk).update(is_anonymous=True)
        self.client.force_authenticate(user=self.organizer)

        response = self.client.get(
            reverse("expos:feedback-detail", kwargs={"pk": self.feedback.pk})
        )

        self.assertIsNone(response.data["data"]["user"])

    def test_escalate(self):
        self.client.force_authenticate(user=self.organizer)

        response = self.client.post(
            reverse("expos:feedback-escalate", kwargs={"pk": self.feedback.pk}),
            {"escalated_to": self.staff.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Feedback escalated successfully")
        self.assertEqual(response.data["data"]["priority"], Feedback.Priority.URGENT)

    def test_resolved_feedback_cannot_be_escalated(self):
        self.feedback.resolve(self.organizer)
        self.client.force_authenticate(user=self.organizer)

        response = self.client.post(
            reverse("expos:feedback-escalate", kwargs={"pk": self.feedback.pk}),
            {},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "ConflictError")

    def test_feedback_analytics(self):
        self.client.force_authenticate(user=self.organizer)

        response = self.client.get(
            reverse("expos:expo-feedback-analytics", kwargs={"pk": self.expo.pk})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["total"], 1)

    def test_feedback_analytics_requires_manager(self):
        self.client.force_authenticate(user=self.attendee_user)

        response = self.client.get(
            reverse("expos:expo-feedback-analytics", kwargs={"pk": self.expo.pk})
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class BookmarkViewTests(APITestCase):
    def setUp(self):
        self.client = APIClient()

        self.organizer = create_user("organizer", role="organizer")
        self.attendee_user = create_user("alice")
        self.expo = create_expo(self.organizer)
        self.exhibitor = create_exhibitor(create_user("acme", role="exhibitor"), self.expo)
        self.attendee = create_attendee(self.attendee_user, self.expo)

    def bookmark(self, exhibitor_id):
        return self.client.post(
            reverse("expos:attendee-bookmark", kwargs={"pk": self.attendee.pk}),
            {"exhibitor_id": str(exhibitor_id)},
            format="json",
        )

    def test_bookmark_exhibitor(self):
        self.client.force_authenticate(user=self.attendee_user)

        response = self.bookmark(self.exhibitor.pk)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "Exhibitor bookmarked successfully")
        self.assertEqual(
            response.data["data"]["exhibitor"]["company_name"], "acme Inc"
        )

    def test_duplicate_bookmark_returns_400(self):
        self.client.force_authenticate(user=self.attendee_user)
        self.bookmark(self.exhibitor.pk)

        response = self.bookmark(self.exhibitor.pk)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "DuplicateError")

    def test_bookmark_other_expo_returns_400(self):
        other_expo = create_expo(self.organizer, title="Other Expo")
        outsider = create_exhibitor(create_user("outsider", role="exhibitor"), other_expo)
        self.client.force_authenticate(user=self.attendee_user)

        response = self.bookmark(outsider.pk)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "ValidationError")

    def test_organizer_cannot_bookmark_for_attendee(self):
        self.client.force_authenticate(user=self.organizer)

        response = self.bookmark(self.exhibitor.pk)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_bookmarks_and_analytics(self):
        self.attendee.bookmark_exhibitor(self.exhibitor)
        self.client.force_authenticate(user=self.attendee_user)

        response = self.client.get(
            reverse("expos:attendee-bookmarks", kwargs={"pk": self.attendee.pk})
        )
        self.assertEqual(len(response.data["data"]), 1)

        response = self.client.get(
            reverse("expos:attendee-analytics", kwargs={"pk": self.attendee.pk})
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["bookmarked_exhibitors"], 1)

    def test_exhibitor_analytics_endpoint(self):
        self.client.force_authenticate(user=self.organizer)

        response = self.client.get(
            reverse("expos:exhibitor-analytics", kwargs={"pk": self.exhibitor.pk})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Exhibitor analytics retrieved successfully")
        self.assertEqual(response.data["data"]["bookmarks"], 0)
