import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("expos", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ExhibitorBookmark",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "bookmarked_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Bookmarked At"),
                ),
                (
                    "attendee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookmarks",
                        to="expos.attendee",
                        verbose_name="Attendee",
                    ),
                ),
                (
                    "exhibitor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookmarks",
                        to="expos.exhibitor",
                        verbose_name="Exhibitor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Exhibitor Bookmark",
                "verbose_name_plural": "Exhibitor Bookmarks",
                "ordering": ["-bookmarked_at"],
                "unique_together": {("attendee", "exhibitor")},
            },
        ),
        migrations.CreateModel(
            name="Feedback",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("general", "General"),
                            ("expo", "Expo"),
                            ("session", "Session"),
                            ("exhibitor", "Exhibitor"),
                            ("booth", "Booth"),
                            ("venue", "Venue"),
                            ("support", "Support"),
                            ("suggestion", "Suggestion"),
                            ("complaint", "Complaint"),
                        ],
                        max_length=20,
                        verbose_name="Type",
                    ),
                ),
                ("subject", models.CharField(max_length=300, verbose_name="Subject")),
                ("message", models.TextField(verbose_name="Message")),
                (
                    "rating",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                        verbose_name="Rating",
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("organization", "Organization"),
                            ("content", "Content"),
                            ("venue", "Venue"),
                            ("technology", "Technology"),
                            ("networking", "Networking"),
                            ("catering", "Catering"),
                            ("logistics", "Logistics"),
                            ("staff", "Staff"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                        verbose_name="Category",
                    ),
                ),
                (
                    "priority",
                    models.CharField(
                        choices=[
                            ("low", "Low"),
                            ("medium", "Medium"),
                            ("high", "High"),
                            ("urgent", "Urgent"),
                        ],
                        default="medium",
                        max_length=10,
                        verbose_name="Priority",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("open", "Open"),
                            ("in_progress", "In Progress"),
                            ("resolved", "Resolved"),
                            ("closed", "Closed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="open",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "related_entity_type",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("expo", "Expo"),
                            ("session", "Session"),
                            ("exhibitor", "Exhibitor"),
                            ("booth", "Booth"),
                            ("user", "User"),
                        ],
                        max_length=20,
                        verbose_name="Related Entity Type",
                    ),
                ),
                (
                    "related_entity_id",
                    models.CharField(
                        blank=True, max_length=64, verbose_name="Related Entity ID"
                    ),
                ),
                (
                    "attachments",
                    models.JSONField(blank=True, default=list, verbose_name="Attachments"),
                ),
                ("tags", models.JSONField(blank=True, default=list, verbose_name="Tags")),
                (
                    "is_anonymous",
                    models.BooleanField(default=False, verbose_name="Is Anonymous"),
                ),
                ("is_public", models.BooleanField(default=False, verbose_name="Is Public")),
                (
                    "contact_preference",
                    models.CharField(
                        choices=[
                            ("email", "Email"),
                            ("phone", "Phone"),
                            ("in_app", "In App"),
                            ("no_contact", "No Contact"),
                        ],
                        default="email",
                        max_length=20,
                        verbose_name="Contact Preference",
                    ),
                ),
                (
                    "follow_up_required",
                    models.BooleanField(default=False, verbose_name="Follow-up Required"),
                ),
                (
                    "follow_up_date",
                    models.DateTimeField(
                        blank=True, null=True, verbose_name="Follow-up Date"
                    ),
                ),
                (
                    "assigned_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Assigned At"),
                ),
                (
                    "resolved_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Resolved At"),
                ),
                ("resolution", models.TextField(blank=True, verbose_name="Resolution")),
                ("escalated", models.BooleanField(default=False, verbose_name="Escalated")),
                (
                    "escalated_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Escalated At"),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created At"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="Updated At"),
                ),
                (
                    "assigned_to",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_feedback",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assigned To",
                    ),
                ),
                (
                    "escalated_to",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="escalated_feedback",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Escalated To",
                    ),
                ),
                (
                    "expo",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedback",
                        to="expos.expo",
                        verbose_name="Expo",
                    ),
                ),
                (
                    "resolved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="resolved_feedback",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Resolved By",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="expo_feedback",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Feedback",
                "verbose_name_plural": "Feedback",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["expo", "type"], name="feedback_expo_type_idx"),
                    models.Index(
                        fields=["expo", "status"], name="feedback_expo_status_idx"
                    ),
                    models.Index(
                        fields=["assigned_to", "status"], name="feedback_assignee_idx"
                    ),
                    models.Index(
                        fields=["priority", "status"], name="feedback_priority_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="FeedbackResponse",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("message", models.TextField(verbose_name="Message")),
                ("is_internal", models.BooleanField(default=False, verbose_name="Internal")),
                (
                    "responded_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Responded At"),
                ),
                (
                    "feedback",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="responses",
                        to="expos.feedback",
                        verbose_name="Feedback",
                    ),
                ),
                (
                    "responded_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedback_responses",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Responded By",
                    ),
                ),
            ],
            options={
                "verbose_name": "Feedback Response",
                "verbose_name_plural": "Feedback Responses",
                "ordering": ["responded_at"],
            },
        ),
    ]
