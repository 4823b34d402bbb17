import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Expo",
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
                ("title", models.CharField(max_length=300, verbose_name="Title")),
                ("description", models.TextField(verbose_name="Description")),
                ("theme", models.CharField(blank=True, max_length=200, verbose_name="Theme")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("technology", "Technology"),
                            ("healthcare", "Healthcare"),
                            ("education", "Education"),
                            ("business", "Business"),
                            ("arts", "Arts"),
                            ("fashion", "Fashion"),
                            ("food", "Food"),
                            ("automotive", "Automotive"),
                            ("real_estate", "Real Estate"),
                            ("other", "Other"),
                        ],
                        default="other",
                        max_length=20,
                        verbose_name="Category",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("published", "Published"),
                            ("ongoing", "Ongoing"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="draft",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("start_date", models.DateTimeField(verbose_name="Start Date")),
                ("end_date", models.DateTimeField(verbose_name="End Date")),
                (
                    "registration_deadline",
                    models.DateTimeField(verbose_name="Registration Deadline"),
                ),
                ("venue", models.CharField(max_length=300, verbose_name="Venue")),
                (
                    "address",
                    models.CharField(blank=True, max_length=500, verbose_name="Address"),
                ),
                ("city", models.CharField(max_length=100, verbose_name="City")),
                ("state", models.CharField(blank=True, max_length=100, verbose_name="State")),
                (
                    "zip_code",
                    models.CharField(blank=True, max_length=20, verbose_name="Zip Code"),
                ),
                ("country", models.CharField(max_length=100, verbose_name="Country")),
                ("max_capacity", models.PositiveIntegerField(verbose_name="Max Capacity")),
                (
                    "registration_fee",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=10,
                        verbose_name="Registration Fee",
                    ),
                ),
                (
                    "booth_price",
                    models.DecimalField(
                        decimal_places=2, default=0, max_digits=10, verbose_name="Booth Price"
                    ),
                ),
                ("total_booths", models.PositiveIntegerField(verbose_name="Total Booths")),
                (
                    "floor_plan_url",
                    models.URLField(blank=True, verbose_name="Floor Plan URL"),
                ),
                (
                    "featured_image",
                    models.URLField(blank=True, verbose_name="Featured Image"),
                ),
                ("tags", models.JSONField(blank=True, default=list, verbose_name="Tags")),
                ("is_public", models.BooleanField(default=True, verbose_name="Is Public")),
                (
                    "booked_booths",
                    models.PositiveIntegerField(
                        default=0, editable=False, verbose_name="Booked Booths"
                    ),
                ),
                (
                    "exhibitors_count",
                    models.PositiveIntegerField(
                        default=0, editable=False, verbose_name="Approved Exhibitors"
                    ),
                ),
                (
                    "attendees_count",
                    models.PositiveIntegerField(
                        default=0, editable=False, verbose_name="Active Attendees"
                    ),
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
                    "published_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Published At"),
                ),
                (
                    "organizer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="organized_expos",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Organizer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Expo",
                "verbose_name_plural": "Expos",
                "ordering": ["-start_date"],
                "indexes": [
                    models.Index(
                        fields=["organizer", "start_date"], name="expo_organizer_start_idx"
                    ),
                    models.Index(fields=["status", "is_public"], name="expo_status_public_idx"),
                    models.Index(fields=["city", "country"], name="expo_city_country_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Booth",
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
                ("booth_number", models.CharField(max_length=20, verbose_name="Booth Number")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("available", "Available"),
                            ("reserved", "Reserved"),
                            ("booked", "Booked"),
                            ("occupied", "Occupied"),
                            ("maintenance", "Maintenance"),
                        ],
                        default="available",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "reserved_until",
                    models.DateTimeField(blank=True, null=True, verbose_name="Reserved Until"),
                ),
                (
                    "booth_details",
                    models.JSONField(blank=True, default=dict, verbose_name="Booth Details"),
                ),
                (
                    "width",
                    models.FloatField(
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="Width",
                    ),
                ),
                (
                    "height",
                    models.FloatField(
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="Height",
                    ),
                ),
                (
                    "unit",
                    models.CharField(
                        choices=[("ft", "Feet"), ("m", "Meters")],
                        default="ft",
                        max_length=2,
                        verbose_name="Unit",
                    ),
                ),
                ("position_x", models.FloatField(default=0, verbose_name="Position X")),
                ("position_y", models.FloatField(default=0, verbose_name="Position Y")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("standard", "Standard"),
                            ("premium", "Premium"),
                            ("corner", "Corner"),
                            ("island", "Island"),
                        ],
                        default="standard",
                        max_length=20,
                        verbose_name="Category",
                    ),
                ),
                (
                    "amenities",
                    models.JSONField(blank=True, default=list, verbose_name="Amenities"),
                ),
                (
                    "price",
                    models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Price"),
                ),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                (
                    "setup_requirements",
                    models.JSONField(
                        blank=True, default=dict, verbose_name="Setup Requirements"
                    ),
                ),
                (
                    "visitors_count",
                    models.PositiveIntegerField(default=0, verbose_name="Visitors Count"),
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
                    "expo",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="booths",
                        to="expos.expo",
                        verbose_name="Expo",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booth",
                "verbose_name_plural": "Booths",
                "ordering": ["expo", "booth_number"],
                "indexes": [
                    models.Index(fields=["expo", "status"], name="booth_expo_status_idx"),
                ],
                "unique_together": {("expo", "booth_number")},
            },
        ),
        migrations.CreateModel(
            name="Exhibitor",
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
                ("company_name", models.CharField(max_length=300, verbose_name="Company Name")),
                (
                    "company_description",
                    models.TextField(blank=True, verbose_name="Company Description"),
                ),
                (
                    "industry",
                    models.CharField(
                        choices=[
                            ("technology", "Technology"),
                            ("healthcare", "Healthcare"),
                            ("education", "Education"),
                            ("finance", "Finance"),
                            ("manufacturing", "Manufacturing"),
                            ("retail", "Retail"),
                            ("food_beverage", "Food & Beverage"),
                            ("automotive", "Automotive"),
                            ("real_estate", "Real Estate"),
                            ("other", "Other"),
                        ],
                        default="other",
                        max_length=20,
                        verbose_name="Industry",
                    ),
                ),
                ("website", models.URLField(blank=True, verbose_name="Website")),
                ("logo", models.URLField(blank=True, verbose_name="Logo")),
                (
                    "founded_year",
                    models.PositiveIntegerField(blank=True, null=True, verbose_name="Founded Year"),
                ),
                (
                    "employee_count",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("1-10", "1-10"),
                            ("11-50", "11-50"),
                            ("51-200", "51-200"),
                            ("201-500", "201-500"),
                            ("501-1000", "501-1000"),
                            ("1000+", "1000+"),
                        ],
                        max_length=10,
                        verbose_name="Employee Count",
                    ),
                ),
                (
                    "headquarters",
                    models.JSONField(blank=True, default=dict, verbose_name="Headquarters"),
                ),
                ("contact_name", models.CharField(max_length=200, verbose_name="Contact Name")),
                (
                    "contact_title",
                    models.CharField(blank=True, max_length=200, verbose_name="Contact Title"),
                ),
                ("contact_email", models.EmailField(max_length=254, verbose_name="Contact Email")),
                ("contact_phone", models.CharField(max_length=30, verbose_name="Contact Phone")),
                (
                    "alternate_contact",
                    models.JSONField(blank=True, default=dict, verbose_name="Alternate Contact"),
                ),
                (
                    "products_services",
                    models.JSONField(blank=True, default=list, verbose_name="Products & Services"),
                ),
                (
                    "booth_requirements",
                    models.JSONField(blank=True, default=dict, verbose_name="Booth Requirements"),
                ),
                (
                    "staff_members",
                    models.JSONField(blank=True, default=list, verbose_name="Staff Members"),
                ),
                (
                    "social_media",
                    models.JSONField(blank=True, default=dict, verbose_name="Social Media"),
                ),
                (
                    "application_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                            ("waitlisted", "Waitlisted"),
                        ],
                        default="pending",
                        max_length=20,
                        verbose_name="Application Status",
                    ),
                ),
                (
                    "applied_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Applied At"),
                ),
                (
                    "reviewed_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Reviewed At"),
                ),
                ("review_notes", models.TextField(blank=True, verbose_name="Review Notes")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created At"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="Updated At"),
                ),
                (
                    "assigned_booth",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_exhibitor",
                        to="expos.booth",
                        verbose_name="Assigned Booth",
                    ),
                ),
                (
                    "expo",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="exhibitors",
                        to="expos.expo",
                        verbose_name="Expo",
                    ),
                ),
                (
                    "reviewed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reviewed_exhibitors",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Reviewed By",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="exhibitor_applications",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Exhibitor",
                "verbose_name_plural": "Exhibitors",
                "ordering": ["-applied_at"],
                "indexes": [
                    models.Index(
                        fields=["expo", "application_status"], name="exhibitor_expo_status_idx"
                    ),
                    models.Index(fields=["industry"], name="exhibitor_industry_idx"),
                ],
                "unique_together": {("user", "expo")},
            },
        ),
        migrations.AddField(
            model_name="booth",
            name="exhibitor",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.RESTRICT,
                related_name="booths",
                to="expos.exhibitor",
                verbose_name="Exhibitor",
            ),
        ),
        migrations.CreateModel(
            name="Attendee",
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
                    "ticket_type",
                    models.CharField(
                        choices=[
                            ("general", "General"),
                            ("vip", "VIP"),
                            ("press", "Press"),
                            ("student", "Student"),
                            ("exhibitor", "Exhibitor"),
                        ],
                        default="general",
                        max_length=20,
                        verbose_name="Ticket Type",
                    ),
                ),
                (
                    "registration_status",
                    models.CharField(
                        choices=[
                            ("registered", "Registered"),
                            ("confirmed", "Confirmed"),
                            ("checked_in", "Checked In"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="registered",
                        max_length=20,
                        verbose_name="Registration Status",
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        choices=[
                            ("website", "Website"),
                            ("social_media", "Social Media"),
                            ("email", "Email"),
                            ("referral", "Referral"),
                            ("partner", "Partner"),
                            ("other", "Other"),
                        ],
                        default="website",
                        max_length=20,
                        verbose_name="Source",
                    ),
                ),
                (
                    "referral_code",
                    models.CharField(blank=True, max_length=50, verbose_name="Referral Code"),
                ),
                (
                    "special_requirements",
                    models.TextField(blank=True, verbose_name="Special Requirements"),
                ),
                (
                    "job_title",
                    models.CharField(blank=True, max_length=200, verbose_name="Job Title"),
                ),
                (
                    "industry",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("technology", "Technology"),
                            ("healthcare", "Healthcare"),
                            ("education", "Education"),
                            ("finance", "Finance"),
                            ("manufacturing", "Manufacturing"),
                            ("retail", "Retail"),
                            ("food_beverage", "Food & Beverage"),
                            ("automotive", "Automotive"),
                            ("real_estate", "Real Estate"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                        verbose_name="Industry",
                    ),
                ),
                (
                    "experience_level",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("student", "Student"),
                            ("entry", "Entry"),
                            ("mid", "Mid"),
                            ("senior", "Senior"),
                            ("executive", "Executive"),
                        ],
                        max_length=20,
                        verbose_name="Experience Level",
                    ),
                ),
                (
                    "interests",
                    models.JSONField(blank=True, default=list, verbose_name="Interests"),
                ),
                (
                    "objectives",
                    models.JSONField(blank=True, default=list, verbose_name="Objectives"),
                ),
                ("bio", models.TextField(blank=True, verbose_name="Bio")),
                ("checked_in", models.BooleanField(default=False, verbose_name="Checked In")),
                (
                    "check_in_time",
                    models.DateTimeField(blank=True, null=True, verbose_name="Check-in Time"),
                ),
                (
                    "badge_number",
                    models.CharField(blank=True, max_length=50, verbose_name="Badge Number"),
                ),
                (
                    "check_in_method",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("qr_code", "QR Code"),
                            ("manual", "Manual"),
                            ("mobile_app", "Mobile App"),
                        ],
                        max_length=20,
                        verbose_name="Check-in Method",
                    ),
                ),
                (
                    "registered_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Registered At"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="Updated At"),
                ),
                (
                    "expo",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendees",
                        to="expos.expo",
                        verbose_name="Expo",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="expo_registrations",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Attendee",
                "verbose_name_plural": "Attendees",
                "ordering": ["-registered_at"],
                "indexes": [
                    models.Index(
                        fields=["expo", "registration_status"], name="attendee_expo_status_idx"
                    ),
                    models.Index(
                        fields=["expo", "checked_in"], name="attendee_expo_checkin_idx"
                    ),
                ],
                "unique_together": {("user", "expo")},
            },
        ),
        migrations.CreateModel(
            name="Schedule",
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
                ("title", models.CharField(max_length=300, verbose_name="Title")),
                ("description", models.TextField(verbose_name="Description")),
                (
                    "session_type",
                    models.CharField(
                        choices=[
                            ("keynote", "Keynote"),
                            ("workshop", "Workshop"),
                            ("panel", "Panel"),
                            ("presentation", "Presentation"),
                            ("networking", "Networking"),
                            ("break", "Break"),
                            ("other", "Other"),
                        ],
                        default="presentation",
                        max_length=20,
                        verbose_name="Session Type",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Scheduled"),
                            ("ongoing", "Ongoing"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="scheduled",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("date", models.DateField(verbose_name="Date")),
                ("start_time", models.TimeField(verbose_name="Start Time")),
                ("end_time", models.TimeField(verbose_name="End Time")),
                ("room", models.CharField(max_length=100, verbose_name="Room")),
                (
                    "room_capacity",
                    models.PositiveIntegerField(default=0, verbose_name="Room Capacity"),
                ),
                ("floor", models.CharField(blank=True, max_length=50, verbose_name="Floor")),
                (
                    "building",
                    models.CharField(blank=True, max_length=100, verbose_name="Building"),
                ),
                ("speakers", models.JSONField(blank=True, default=list, verbose_name="Speakers")),
                ("topics", models.JSONField(blank=True, default=list, verbose_name="Topics")),
                (
                    "materials",
                    models.JSONField(blank=True, default=list, verbose_name="Materials"),
                ),
                ("tags", models.JSONField(blank=True, default=list, verbose_name="Tags")),
                ("max_attendees", models.PositiveIntegerField(verbose_name="Max Attendees")),
                (
                    "registration_required",
                    models.BooleanField(default=True, verbose_name="Registration Required"),
                ),
                (
                    "fee",
                    models.DecimalField(
                        decimal_places=2, default=0, max_digits=10, verbose_name="Fee"
                    ),
                ),
                (
                    "attendee_count",
                    models.PositiveIntegerField(
                        default=0, editable=False, verbose_name="Attendee Count"
                    ),
                ),
                (
                    "rating_average",
                    models.FloatField(default=0.0, editable=False, verbose_name="Average Rating"),
                ),
                (
                    "rating_count",
                    models.PositiveIntegerField(
                        default=0, editable=False, verbose_name="Rating Count"
                    ),
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
                    "expo",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="schedules",
                        to="expos.expo",
                        verbose_name="Expo",
                    ),
                ),
            ],
            options={
                "verbose_name": "Schedule",
                "verbose_name_plural": "Schedules",
                "ordering": ["date", "start_time"],
                "indexes": [
                    models.Index(
                        fields=["expo", "date", "start_time"], name="schedule_expo_date_idx"
                    ),
                    models.Index(
                        fields=["expo", "session_type"], name="schedule_expo_type_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SessionRegistration",
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
                    "registered_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Registered At"),
                ),
                ("attended", models.BooleanField(default=False, verbose_name="Attended")),
                (
                    "attendee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="session_registrations",
                        to="expos.attendee",
                        verbose_name="Attendee",
                    ),
                ),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendees",
                        to="expos.schedule",
                        verbose_name="Session",
                    ),
                ),
            ],
            options={
                "verbose_name": "Session Registration",
                "verbose_name_plural": "Session Registrations",
                "ordering": ["registered_at"],
                "unique_together": {("session", "attendee")},
            },
        ),
        migrations.CreateModel(
            name="SessionFeedback",
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
                    "rating",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                        verbose_name="Rating",
                    ),
                ),
                ("comment", models.TextField(blank=True, verbose_name="Comment")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created At"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="Updated At"),
                ),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedback",
                        to="expos.schedule",
                        verbose_name="Session",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="session_feedback",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Session Feedback",
                "verbose_name_plural": "Session Feedback",
                "ordering": ["-created_at"],
                "unique_together": {("session", "user")},
            },
        ),
    ]
