import logging
import uuid
from datetime import timedelta

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import DatabaseError, IntegrityError, models, transaction
from django.db.models import Avg, Count, F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import APIException

from apps.common.exceptions import (
    CapacityError,
    ConflictError,
    DuplicateError,
    NotFoundError,
    PartialFailureError,
    ValidationError,
)

logger = logging.getLogger(__name__)

RELEASE_ATTEMPTS = 3


def _rate(part, whole):
    """Percentage rounded to two decimals, 0 when there is nothing to divide."""
    if not whole:
        return 0
    return round(part / whole * 100, 2)


class GuardedFieldsModel(models.Model):
    """
    Plain ``save()`` calls on existing rows skip ``guarded_fields``.

    Those fields only change through conditional ``update()`` calls in the
    state transitions, and a full save would write back stale values.
    """

    guarded_fields = ()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding and kwargs.get("update_fields") is None:
            kwargs["update_fields"] = [
                field.name
                for field in self._meta.concrete_fields
                if not field.primary_key and field.name not in self.guarded_fields
            ]
        super().save(*args, **kwargs)


class ExpoQuerySet(models.QuerySet):
    """Custom queryset for Expo with useful filters."""

    def published(self):
        return self.filter(status=Expo.Status.PUBLISHED)

    def registration_open(self):
        return self.filter(
            status=Expo.Status.PUBLISHED, registration_deadline__gt=timezone.now()
        )

    def by_organizer(self, user):
        return self.filter(organizer=user)

    def visible_to(self, user):
        if user.is_platform_admin:
            return self
        return self.filter(
            Q(
                is_public=True,
                status__in=[
                    Expo.Status.PUBLISHED,
                    Expo.Status.ONGOING,
                    Expo.Status.COMPLETED,
                ],
            )
            | Q(organizer=user)
        )


class Expo(GuardedFieldsModel):
    """
    An exhibition with booths, exhibitor applications, attendee registrations
    and a session schedule.

    ``booked_booths``, ``exhibitors_count`` and ``attendees_count`` are cached
    counts of the booked booths, approved exhibitors and active attendees.
    They are only written by the state transitions below and rebuilt from
    scans by :meth:`recompute_counters`.
    """

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        PUBLISHED = "published", _("Published")
        ONGOING = "ongoing", _("Ongoing")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    class Category(models.TextChoices):
        TECHNOLOGY = "technology", _("Technology")
        HEALTHCARE = "healthcare", _("Healthcare")
        EDUCATION = "education", _("Education")
        BUSINESS = "business", _("Business")
        ARTS = "arts", _("Arts")
        FASHION = "fashion", _("Fashion")
        FOOD = "food", _("Food")
        AUTOMOTIVE = "automotive", _("Automotive")
        REAL_ESTATE = "real_estate", _("Real Estate")
        OTHER = "other", _("Other")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(_("Title"), max_length=300)
    description = models.TextField(_("Description"))
    theme = models.CharField(_("Theme"), max_length=200, blank=True)
    category = models.CharField(
        _("Category"), max_length=20, choices=Category.choices, default=Category.OTHER
    )
    status = models.CharField(
        _("Status"), max_length=20, choices=Status.choices, default=Status.DRAFT
    )
    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="organized_expos",
        verbose_name=_("Organizer"),
    )

    # Dates
    start_date = models.DateTimeField(_("Start Date"))
    end_date = models.DateTimeField(_("End Date"))
    registration_deadline = models.DateTimeField(_("Registration Deadline"))

    # Venue
    venue = models.CharField(_("Venue"), max_length=300)
    address = models.CharField(_("Address"), max_length=500, blank=True)
    city = models.CharField(_("City"), max_length=100)
    state = models.CharField(_("State"), max_length=100, blank=True)
    zip_code = models.CharField(_("Zip Code"), max_length=20, blank=True)
    country = models.CharField(_("Country"), max_length=100)

    # Pricing and capacity
    max_capacity = models.PositiveIntegerField(_("Max Capacity"))
    registration_fee = models.DecimalField(
        _("Registration Fee"), max_digits=10, decimal_places=2, default=0
    )
    booth_price = models.DecimalField(
        _("Booth Price"), max_digits=10, decimal_places=2, default=0
    )
    total_booths = models.PositiveIntegerField(_("Total Booths"))

    # Presentation
    floor_plan_url = models.URLField(_("Floor Plan URL"), blank=True)
    featured_image = models.URLField(_("Featured Image"), blank=True)
    tags = models.JSONField(_("Tags"), default=list, blank=True)
    is_public = models.BooleanField(_("Is Public"), default=True)

    # Derived counters
    booked_booths = models.PositiveIntegerField(
        _("Booked Booths"), default=0, editable=False
    )
    exhibitors_count = models.PositiveIntegerField(
        _("Approved Exhibitors"), default=0, editable=False
    )
    attendees_count = models.PositiveIntegerField(
        _("Active Attendees"), default=0, editable=False
    )

    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)
    published_at = models.DateTimeField(_("Published At"), null=True, blank=True)

    class Meta:
        verbose_name = _("Expo")
        verbose_name_plural = _("Expos")
        ordering = ["-start_date"]
        indexes = [
            models.Index(fields=["organizer", "start_date"], name="expo_organizer_start_idx"),
            models.Index(fields=["status", "is_public"], name="expo_status_public_idx"),
            models.Index(fields=["city", "country"], name="expo_city_country_idx"),
        ]

    objects = ExpoQuerySet.as_manager()

    guarded_fields = ("booked_booths", "exhibitors_count", "attendees_count")

    def __str__(self):
        return self.title

    @property
    def available_booths(self):
        return self.total_booths - self.booked_booths

    @property
    def is_registration_open(self):
        return (
            self.status == self.Status.PUBLISHED
            and timezone.now() < self.registration_deadline
        )

    @property
    def is_active(self):
        return self.start_date <= timezone.now() <= self.end_date

    def publish(self):
        """Make the expo visible and open for registration."""
        if self.status not in [self.Status.DRAFT, self.Status.PUBLISHED]:
            raise ConflictError(f"A {self.status} expo cannot be published.")
        self.status = self.Status.PUBLISHED
        if not self.published_at:
            self.published_at = timezone.now()
        self.save(update_fields=["status", "published_at", "updated_at"])
        logger.info(f"Expo {self.pk} published")

    def ensure_booth_capacity(self, count=1):
        """Raise when ``count`` more booths would exceed ``total_booths``."""
        existing = self.booths.count()
        if existing + count > self.total_booths:
            raise CapacityError(
                f"Expo allows {self.total_booths} booths; {existing} already exist."
            )

    def delete(self, *args, **kwargs):
        if self.exhibitors.filter(
            application_status=Exhibitor.ApplicationStatus.APPROVED
        ).exists():
            raise ConflictError("Cannot delete an expo with approved exhibitors.")
        if self.attendees.filter(
            registration_status__in=Attendee.ACTIVE_STATUSES
        ).exists():
            raise ConflictError("Cannot delete an expo with registered attendees.")
        logger.info(f"Deleting expo {self.pk}")
        return super().delete(*args, **kwargs)

    def scan_counters(self):
        """Count the authoritative per-entity states behind each counter."""
        return {
            "booked_booths": self.booths.filter(status=Booth.Status.BOOKED).count(),
            "exhibitors_count": self.exhibitors.filter(
                application_status=Exhibitor.ApplicationStatus.APPROVED
            ).count(),
            "attendees_count": self.attendees.filter(
                registration_status__in=Attendee.ACTIVE_STATUSES
            ).count(),
        }

    @property
    def counters_in_sync(self):
        """Compare the stored counter row, not this instance, against scans."""
        actual = self.scan_counters()
        stored = Expo.objects.filter(pk=self.pk).values(*actual).first()
        return stored == actual

    def recompute_counters(self, commit=True):
        """
        Rebuild the expo counters and every session's ``attendee_count``
        from full scans.

        Returns a report of the drift found. With ``commit=False`` nothing is
        written, which is what the ``--dry-run`` reconciliation uses.
        """
        now = timezone.now()
        with transaction.atomic():
            expo = Expo.objects.select_for_update().get(pk=self.pk)
            actual = expo.scan_counters()
            drift = {
                field: {"stored": getattr(expo, field), "actual": value}
                for field, value in actual.items()
                if getattr(expo, field) != value
            }

            session_drift = []
            sessions = expo.schedules.annotate(registered=Count("attendees"))
            for session in sessions:
                if session.attendee_count == session.registered:
                    continue
                session_drift.append(
                    {
                        "session": str(session.pk),
                        "stored": session.attendee_count,
                        "actual": session.registered,
                    }
                )
                if commit:
                    Schedule.objects.filter(pk=session.pk).update(
                        attendee_count=session.registered, updated_at=now
                    )

            if commit and drift:
                Expo.objects.filter(pk=expo.pk).update(**actual, updated_at=now)

            link_drift = []
            stale = expo.exhibitors.filter(assigned_booth__isnull=False).exclude(
                assigned_booth__status=Booth.Status.BOOKED,
                assigned_booth__exhibitor=F("pk"),
            )
            for exhibitor in stale:
                link_drift.append(
                    {
                        "booth": str(exhibitor.assigned_booth_id),
                        "exhibitor": str(exhibitor.pk),
                        "fix": "unlink",
                    }
                )
                if commit:
                    Exhibitor.objects.filter(pk=exhibitor.pk).update(
                        assigned_booth=None, updated_at=now
                    )
            unlinked = expo.booths.booked().filter(
                exhibitor__assigned_booth__isnull=True
            )
            for booth in unlinked:
                link_drift.append(
                    {"booth": str(booth.pk), "exhibitor": str(booth.exhibitor_id), "fix": "link"}
                )
                if commit:
                    Exhibitor.objects.filter(
                        pk=booth.exhibitor_id, assigned_booth__isnull=True
                    ).update(assigned_booth=booth, updated_at=now)

        if drift or session_drift or link_drift:
            logger.warning(
                f"Counter drift on expo {self.pk}: {drift} sessions={session_drift} "
                f"links={link_drift}{'' if commit else ' (dry run)'}"
            )
        if commit:
            for field, value in actual.items():
                setattr(self, field, value)

        return {
            "expo": str(self.pk),
            "counters": actual,
            "drift": drift,
            "sessions": session_drift,
            "links": link_drift,
            "repaired": commit and bool(drift or session_drift or link_drift),
        }

    def floor_plan(self):
        booths = self.booths.select_related("exhibitor").order_by("booth_number")
        return [
            {
                "id": str(booth.pk),
                "booth_number": booth.booth_number,
                "status": booth.effective_status,
                "category": booth.category,
                "position": {"x": booth.position_x, "y": booth.position_y},
                "size": {
                    "width": booth.width,
                    "height": booth.height,
                    "unit": booth.unit,
                },
                "price": booth.price,
                "exhibitor": (
                    booth.exhibitor.company_name if booth.exhibitor_id else None
                ),
            }
            for booth in booths
        ]

    def analytics(self):
        exhibitors = self.exhibitors.all()
        attendees = self.attendees.all()
        booths = self.booths.all()

        total_exhibitors = exhibitors.count()
        approved_exhibitors = exhibitors.filter(
            application_status=Exhibitor.ApplicationStatus.APPROVED
        ).count()
        total_attendees = attendees.count()
        checked_in_attendees = attendees.filter(checked_in=True).count()
        total_booths = booths.count()
        booked_booths = booths.filter(status=Booth.Status.BOOKED).count()
        session_attendance = SessionRegistration.objects.filter(
            session__expo=self
        ).count()

        def breakdown(queryset, field):
            return {
                row[field]: row["count"]
                for row in queryset.values(field).annotate(count=Count("id"))
            }

        booths_by_category = [
            {"category": row["category"], "total": row["total"], "booked": row["booked"]}
            for row in booths.values("category").annotate(
                total=Count("id"),
                booked=Count("id", filter=Q(status=Booth.Status.BOOKED)),
            )
        ]

        return {
            "overview": {
                "total_exhibitors": total_exhibitors,
                "approved_exhibitors": approved_exhibitors,
                "total_attendees": total_attendees,
                "checked_in_attendees": checked_in_attendees,
                "total_booths": total_booths,
                "booked_booths": booked_booths,
                "total_sessions": self.schedules.count(),
                "session_attendance": session_attendance,
            },
            "exhibitors": {"by_status": breakdown(exhibitors, "application_status")},
            "attendees": {"by_status": breakdown(attendees, "registration_status")},
            "booths": {"by_category": booths_by_category},
            "occupancy_rate": _rate(booked_booths, total_booths),
            "check_in_rate": _rate(checked_in_attendees, total_attendees),
            "counters_in_sync": self.counters_in_sync,
        }


class BoothQuerySet(models.QuerySet):
    """Custom queryset for Booth with useful filters."""

    def available(self):
        """Booths that are available, counting expired reservations as available."""
        now = timezone.now()
        return self.filter(
            Q(status=Booth.Status.AVAILABLE)
            | Q(status=Booth.Status.RESERVED)
            & (Q(reserved_until__lte=now) | Q(reserved_until__isnull=True))
        )

    def booked(self):
        return self.filter(status=Booth.Status.BOOKED)

    def by_expo(self, expo):
        return self.filter(expo=expo)


class Booth(GuardedFieldsModel):
    """
    A numbered booth on an expo floor.

    Status changes go through :meth:`reserve`, :meth:`book` and
    :meth:`release`, each a conditional single-row update so that at most
    one concurrent request wins.
    """

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        RESERVED = "reserved", _("Reserved")
        BOOKED = "booked", _("Booked")
        OCCUPIED = "occupied", _("Occupied")
        MAINTENANCE = "maintenance", _("Maintenance")

    class Category(models.TextChoices):
        STANDARD = "standard", _("Standard")
        PREMIUM = "premium", _("Premium")
        CORNER = "corner", _("Corner")
        ISLAND = "island", _("Island")

    class Unit(models.TextChoices):
        FEET = "ft", _("Feet")
        METERS = "m", _("Meters")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expo = models.ForeignKey(
        Expo, on_delete=models.CASCADE, related_name="booths", verbose_name=_("Expo")
    )
    booth_number = models.CharField(_("Booth Number"), max_length=20)
    status = models.CharField(
        _("Status"), max_length=20, choices=Status.choices, default=Status.AVAILABLE
    )
    exhibitor = models.ForeignKey(
        "Exhibitor",
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name="booths",
        verbose_name=_("Exhibitor"),
    )
    reserved_until = models.DateTimeField(_("Reserved Until"), null=True, blank=True)
    booth_details = models.JSONField(_("Booth Details"), default=dict, blank=True)

    # Floor plan
    width = models.FloatField(_("Width"), validators=[MinValueValidator(0)])
    height = models.FloatField(_("Height"), validators=[MinValueValidator(0)])
    unit = models.CharField(
        _("Unit"), max_length=2, choices=Unit.choices, default=Unit.FEET
    )
    position_x = models.FloatField(_("Position X"), default=0)
    position_y = models.FloatField(_("Position Y"), default=0)
    category = models.CharField(
        _("Category"),
        max_length=20,
        choices=Category.choices,
        default=Category.STANDARD,
    )
    amenities = models.JSONField(_("Amenities"), default=list, blank=True)
    price = models.DecimalField(_("Price"), max_digits=10, decimal_places=2)
    description = models.TextField(_("Description"), blank=True)
    setup_requirements = models.JSONField(
        _("Setup Requirements"), default=dict, blank=True
    )
    visitors_count = models.PositiveIntegerField(_("Visitors Count"), default=0)

    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Booth")
        verbose_name_plural = _("Booths")
        ordering = ["expo", "booth_number"]
        unique_together = [["expo", "booth_number"]]
        indexes = [
            models.Index(fields=["expo", "status"], name="booth_expo_status_idx"),
        ]

    objects = BoothQuerySet.as_manager()

    guarded_fields = ("status", "exhibitor", "reserved_until", "booth_details")

    def __str__(self):
        return f"{self.booth_number} ({self.expo})"

    @property
    def reservation_expired(self):
        return self.status == self.Status.RESERVED and (
            self.reserved_until is None or self.reserved_until <= timezone.now()
        )

    @property
    def effective_status(self):
        """Status as every reader sees it: an expired reservation is available."""
        if self.reservation_expired:
            return self.Status.AVAILABLE
        return self.status

    @property
    def is_available(self):
        return self.effective_status == self.Status.AVAILABLE

    @property
    def area(self):
        return self.width * self.height

    def reserve(self, duration_minutes=None):
        """Hold the booth for ``duration_minutes`` (default from settings)."""
        if duration_minutes is None:
            duration_minutes = settings.EXPO_DEFAULT_RESERVATION_MINUTES
        if duration_minutes <= 0:
            raise ValidationError("Reservation duration must be a positive number of minutes.")
        if duration_minutes > settings.EXPO_MAX_RESERVATION_MINUTES:
            raise ValidationError(
                f"Reservation duration cannot exceed {settings.EXPO_MAX_RESERVATION_MINUTES} minutes."
            )

        now = timezone.now()
        reserved_until = now + timedelta(minutes=duration_minutes)
        updated = (
            Booth.objects.filter(pk=self.pk)
            .available()
            .update(
                status=self.Status.RESERVED,
                reserved_until=reserved_until,
                updated_at=now,
            )
        )
        if not updated:
            self.refresh_from_db(fields=["status", "reserved_until", "exhibitor"])
            logger.warning(
                f"Reserve rejected for booth {self.pk}: status {self.effective_status}"
            )
            raise ConflictError(
                f"Booth {self.booth_number} is {self.effective_status} and cannot be reserved."
            )

        self.status = self.Status.RESERVED
        self.reserved_until = reserved_until
        logger.info(f"Booth {self.pk} reserved until {reserved_until.isoformat()}")

    def book(self, exhibitor, booth_details=None):
        """
        Book the booth for an approved exhibitor of the same expo.

        The booth row is committed first. The expo counter and the
        exhibitor's ``assigned_booth`` then change together; if that second
        step fails the booth stays booked and :class:`PartialFailureError`
        is raised so the counters can be reconciled.
        """
        if exhibitor.expo_id != self.expo_id:
            raise ValidationError("Exhibitor does not belong to this expo.")
        if exhibitor.application_status != Exhibitor.ApplicationStatus.APPROVED:
            raise ValidationError(
                "Exhibitor application must be approved before booking a booth."
            )
        held = (
            Exhibitor.objects.filter(pk=exhibitor.pk)
            .values_list("assigned_booth_id", flat=True)
            .first()
        )
        if held and held != self.pk:
            raise ConflictError("Exhibitor already holds another booth; release it first.")

        now = timezone.now()
        booth_details = booth_details or {}
        updated = Booth.objects.filter(
            pk=self.pk,
            status__in=[self.Status.AVAILABLE, self.Status.RESERVED],
        ).update(
            status=self.Status.BOOKED,
            exhibitor=exhibitor,
            reserved_until=None,
            booth_details=booth_details,
            updated_at=now,
        )
        if not updated:
            self.refresh_from_db(fields=["status", "reserved_until", "exhibitor"])
            logger.warning(f"Book rejected for booth {self.pk}: status {self.status}")
            raise ConflictError(
                f"Booth {self.booth_number} is {self.effective_status} and cannot be booked."
            )

        self.status = self.Status.BOOKED
        self.exhibitor = exhibitor
        self.reserved_until = None
        self.booth_details = booth_details
        logger.info(f"Booth {self.pk} booked by exhibitor {exhibitor.pk}")

        try:
            with transaction.atomic():
                counted = Expo.objects.filter(
                    pk=self.expo_id, booked_booths__lt=F("total_booths")
                ).update(booked_booths=F("booked_booths") + 1, updated_at=now)
                if not counted:
                    raise CapacityError("Booked booth counter already equals total booths.")
                linked = (
                    Exhibitor.objects.filter(
                        pk=exhibitor.pk,
                        application_status=Exhibitor.ApplicationStatus.APPROVED,
                    )
                    .filter(Q(assigned_booth__isnull=True) | Q(assigned_booth=self))
                    .update(assigned_booth=self, updated_at=now)
                )
                if not linked:
                    raise ConflictError("Exhibitor could not be linked to the booth.")
        except (APIException, DatabaseError) as exc:
            raise self._partial_failure(
                "book",
                exhibitor_id=exhibitor.pk,
                committed=["booth.status=booked"],
                failed=["expo.booked_booths+1", "exhibitor.assigned_booth"],
                reason=exc,
            ) from exc

        exhibitor.assigned_booth = self

    def release(self):
        """Return the booth to ``available`` from any state."""
        for _attempt in range(RELEASE_ATTEMPTS):
            snapshot = (
                Booth.objects.filter(pk=self.pk)
                .values("status", "exhibitor_id")
                .first()
            )
            if snapshot is None:
                raise NotFoundError("Booth not found.")
            now = timezone.now()
            updated = Booth.objects.filter(
                pk=self.pk,
                status=snapshot["status"],
                exhibitor_id=snapshot["exhibitor_id"],
            ).update(
                status=self.Status.AVAILABLE,
                exhibitor=None,
                reserved_until=None,
                booth_details={},
                updated_at=now,
            )
            if updated:
                break
        else:
            logger.warning(f"Release of booth {self.pk} lost {RELEASE_ATTEMPTS} races")
            raise ConflictError("Booth changed while being released; retry the request.")

        previous_status = snapshot["status"]
        previous_exhibitor = snapshot["exhibitor_id"]
        self.status = self.Status.AVAILABLE
        self.exhibitor = None
        self.reserved_until = None
        self.booth_details = {}
        logger.info(f"Booth {self.pk} released from {previous_status}")

        if previous_status != self.Status.BOOKED and previous_exhibitor is None:
            return

        try:
            with transaction.atomic():
                if previous_status == self.Status.BOOKED:
                    counted = Expo.objects.filter(
                        pk=self.expo_id, booked_booths__gt=0
                    ).update(booked_booths=F("booked_booths") - 1, updated_at=now)
                    if not counted:
                        raise CapacityError("Booked booth counter is already zero.")
                Exhibitor.objects.filter(assigned_booth=self).update(
                    assigned_booth=None, updated_at=now
                )
        except (APIException, DatabaseError) as exc:
            raise self._partial_failure(
                "release",
                exhibitor_id=previous_exhibitor,
                committed=["booth.status=available"],
                failed=["expo.booked_booths-1", "exhibitor.assigned_booth"],
                reason=exc,
            ) from exc

    def _partial_failure(self, operation, exhibitor_id, committed, failed, reason):
        context = {
            "operation": operation,
            "booth": str(self.pk),
            "expo": str(self.expo_id),
            "exhibitor": str(exhibitor_id) if exhibitor_id else None,
            "committed": committed,
            "failed": failed,
            "reason": str(reason.detail if isinstance(reason, APIException) else reason),
            "reconcile": f"/expos/{self.expo_id}/recompute-counters/",
        }
        logger.critical(
            f"Booth {operation} partially applied for booth {self.pk}", extra=context
        )
        return PartialFailureError(context=context)

    def delete(self, *args, **kwargs):
        if Booth.objects.filter(pk=self.pk, status=self.Status.BOOKED).exists():
            raise ConflictError("Cannot delete a booked booth; release it first.")
        logger.info(f"Deleting booth {self.pk}")
        return super().delete(*args, **kwargs)


class ExhibitorQuerySet(models.QuerySet):
    """Custom queryset for Exhibitor with useful filters."""

    def approved(self):
        return self.filter(application_status=Exhibitor.ApplicationStatus.APPROVED)

    def pending(self):
        return self.filter(application_status=Exhibitor.ApplicationStatus.PENDING)

    def by_expo(self, expo):
        return self.filter(expo=expo)


class Exhibitor(GuardedFieldsModel):
    """An exhibitor application of one user to one expo."""

    class ApplicationStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")
        WAITLISTED = "waitlisted", _("Waitlisted")

    class Industry(models.TextChoices):
        TECHNOLOGY = "technology", _("Technology")
        HEALTHCARE = "healthcare", _("Healthcare")
        EDUCATION = "education", _("Education")
        FINANCE = "finance", _("Finance")
        MANUFACTURING = "manufacturing", _("Manufacturing")
        RETAIL = "retail", _("Retail")
        FOOD_BEVERAGE = "food_beverage", _("Food & Beverage")
        AUTOMOTIVE = "automotive", _("Automotive")
        REAL_ESTATE = "real_estate", _("Real Estate")
        OTHER = "other", _("Other")

    class EmployeeCount(models.TextChoices):
        TINY = "1-10", _("1-10")
        SMALL = "11-50", _("11-50")
        MEDIUM = "51-200", _("51-200")
        LARGE = "201-500", _("201-500")
        XLARGE = "501-1000", _("501-1000")
        ENTERPRISE = "1000+", _("1000+")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="exhibitor_applications",
        verbose_name=_("User"),
    )
    expo = models.ForeignKey(
        Expo,
        on_delete=models.CASCADE,
        related_name="exhibitors",
        verbose_name=_("Expo"),
    )

    # Company
    company_name = models.CharField(_("Company Name"), max_length=300)
    company_description = models.TextField(_("Company Description"), blank=True)
    industry = models.CharField(
        _("Industry"), max_length=20, choices=Industry.choices, default=Industry.OTHER
    )
    website = models.URLField(_("Website"), blank=True)
    logo = models.URLField(_("Logo"), blank=True)
    founded_year = models.PositiveIntegerField(_("Founded Year"), null=True, blank=True)
    employee_count = models.CharField(
        _("Employee Count"), max_length=10, choices=EmployeeCount.choices, blank=True
    )
    headquarters = models.JSONField(_("Headquarters"), default=dict, blank=True)

    # Contact
    contact_name = models.CharField(_("Contact Name"), max_length=200)
    contact_title = models.CharField(_("Contact Title"), max_length=200, blank=True)
    contact_email = models.EmailField(_("Contact Email"))
    contact_phone = models.CharField(_("Contact Phone"), max_length=30)
    alternate_contact = models.JSONField(_("Alternate Contact"), default=dict, blank=True)

    products_services = models.JSONField(_("Products & Services"), default=list, blank=True)
    booth_requirements = models.JSONField(_("Booth Requirements"), default=dict, blank=True)
    staff_members = models.JSONField(_("Staff Members"), default=list, blank=True)
    social_media = models.JSONField(_("Social Media"), default=dict, blank=True)

    # Application
    application_status = models.CharField(
        _("Application Status"),
        max_length=20,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.PENDING,
    )
    applied_at = models.DateTimeField(_("Applied At"), auto_now_add=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_exhibitors",
        verbose_name=_("Reviewed By"),
    )
    reviewed_at = models.DateTimeField(_("Reviewed At"), null=True, blank=True)
    review_notes = models.TextField(_("Review Notes"), blank=True)
    assigned_booth = models.OneToOneField(
        Booth,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_exhibitor",
        verbose_name=_("Assigned Booth"),
    )
    notes = models.TextField(_("Notes"), blank=True)

    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Exhibitor")
        verbose_name_plural = _("Exhibitors")
        ordering = ["-applied_at"]
        unique_together = [["user", "expo"]]
        indexes = [
            models.Index(
                fields=["expo", "application_status"], name="exhibitor_expo_status_idx"
            ),
            models.Index(fields=["industry"], name="exhibitor_industry_idx"),
        ]

    objects = ExhibitorQuerySet.as_manager()

    guarded_fields = (
        "application_status",
        "reviewed_by",
        "reviewed_at",
        "review_notes",
        "assigned_booth",
    )

    def __str__(self):
        return f"{self.company_name} - {self.expo}"

    @property
    def is_approved(self):
        return self.application_status == self.ApplicationStatus.APPROVED

    @classmethod
    def apply(cls, user, expo, **data):
        if not expo.is_registration_open:
            raise ValidationError("Applications are closed for this expo.")
        if cls.objects.filter(user=user, expo=expo).exists():
            raise DuplicateError("You have already applied to this expo.")
        try:
            with transaction.atomic():
                exhibitor = cls.objects.create(user=user, expo=expo, **data)
        except IntegrityError as exc:
            raise DuplicateError("You have already applied to this expo.") from exc
        logger.info(f"Exhibitor application {exhibitor.pk} submitted to expo {expo.pk}")
        return exhibitor

    def review(self, reviewer, status, notes=""):
        """
        Record a review decision.

        ``exhibitors_count`` grows only when a non-approved application
        becomes approved. An exhibitor holding a booth cannot leave the
        approved state. Returns True when the application was newly approved.
        """
        if status not in self.ApplicationStatus.values:
            raise ValidationError(f"Invalid application status '{status}'.")

        now = timezone.now()
        review_fields = {
            "reviewed_by": reviewer,
            "reviewed_at": now,
            "review_notes": notes,
            "updated_at": now,
        }
        promoted = False
        with transaction.atomic():
            if status == self.ApplicationStatus.APPROVED:
                promoted = bool(
                    Exhibitor.objects.filter(pk=self.pk)
                    .exclude(application_status=self.ApplicationStatus.APPROVED)
                    .update(application_status=status, **review_fields)
                )
                if promoted:
                    Expo.objects.filter(pk=self.expo_id).update(
                        exhibitors_count=F("exhibitors_count") + 1, updated_at=now
                    )
                else:
                    Exhibitor.objects.filter(pk=self.pk).update(**review_fields)
            else:
                updated = (
                    Exhibitor.objects.filter(pk=self.pk, assigned_booth__isnull=True)
                    .exclude(booths__status=Booth.Status.BOOKED)
                    .update(application_status=status, **review_fields)
                )
                if not updated:
                    logger.warning(
                        f"Review of exhibitor {self.pk} to {status} blocked by a held booth"
                    )
                    raise ConflictError(
                        "Release the exhibitor's booth before changing the application status."
                    )

        self.refresh_from_db()
        logger.info(f"Exhibitor {self.pk} reviewed as {status} by user {reviewer.pk}")
        return promoted

    def assign_booth(self, booth):
        """Move the exhibitor to ``booth``, releasing any booth held before."""
        if booth.expo_id != self.expo_id:
            raise ValidationError("Booth does not belong to this expo.")
        self.refresh_from_db(fields=["assigned_booth", "application_status"])
        previous = self.assigned_booth
        if previous is not None and previous.pk == booth.pk:
            return booth
        if not self.is_approved:
            raise ValidationError(
                "Exhibitor application must be approved before booking a booth."
            )
        booth.refresh_from_db(fields=["status", "reserved_until", "exhibitor"])
        if booth.status not in [Booth.Status.AVAILABLE, Booth.Status.RESERVED]:
            raise ConflictError(
                f"Booth {booth.booth_number} is {booth.effective_status} and cannot be booked."
            )
        if previous is not None:
            previous.release()
            self.assigned_booth = None
        booth.book(self)
        logger.info(f"Exhibitor {self.pk} assigned to booth {booth.pk}")
        return booth

    def analytics(self):
        booth = self.assigned_booth
        return {
            "application_status": self.application_status,
            "booth_number": booth.booth_number if booth else None,
            "booth_visits": booth.visitors_count if booth else 0,
            "bookmarks": self.bookmarks.count(),
            "products_count": len(self.products_services),
            "staff_count": len(self.staff_members),
        }


class AttendeeQuerySet(models.QuerySet):
    """Custom queryset for Attendee with useful filters."""

    def active(self):
        return self.filter(registration_status__in=Attendee.ACTIVE_STATUSES)

    def checked_in(self):
        return self.filter(checked_in=True)

    def by_expo(self, expo):
        return self.filter(expo=expo)


class Attendee(GuardedFieldsModel):
    """A user's registration to attend an expo."""

    class RegistrationStatus(models.TextChoices):
        REGISTERED = "registered", _("Registered")
        CONFIRMED = "confirmed", _("Confirmed")
        CHECKED_IN = "checked_in", _("Checked In")
        CANCELLED = "cancelled", _("Cancelled")

    class TicketType(models.TextChoices):
        GENERAL = "general", _("General")
        VIP = "vip", _("VIP")
        PRESS = "press", _("Press")
        STUDENT = "student", _("Student")
        EXHIBITOR = "exhibitor", _("Exhibitor")

    class Source(models.TextChoices):
        WEBSITE = "website", _("Website")
        SOCIAL_MEDIA = "social_media", _("Social Media")
        EMAIL = "email", _("Email")
        REFERRAL = "referral", _("Referral")
        PARTNER = "partner", _("Partner")
        OTHER = "other", _("Other")

    class CheckInMethod(models.TextChoices):
        QR_CODE = "qr_code", _("QR Code")
        MANUAL = "manual", _("Manual")
        MOBILE_APP = "mobile_app", _("Mobile App")

    class ExperienceLevel(models.TextChoices):
        STUDENT = "student", _("Student")
        ENTRY = "entry", _("Entry")
        MID = "mid", _("Mid")
        SENIOR = "senior", _("Senior")
        EXECUTIVE = "executive", _("Executive")

    ACTIVE_STATUSES = [
        RegistrationStatus.REGISTERED,
        RegistrationStatus.CONFIRMED,
        RegistrationStatus.CHECKED_IN,
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="expo_registrations",
        verbose_name=_("User"),
    )
    expo = models.ForeignKey(
        Expo, on_delete=models.CASCADE, related_name="attendees", verbose_name=_("Expo")
    )

    # Registration
    ticket_type = models.CharField(
        _("Ticket Type"),
        max_length=20,
        choices=TicketType.choices,
        default=TicketType.GENERAL,
    )
    registration_status = models.CharField(
        _("Registration Status"),
        max_length=20,
        choices=RegistrationStatus.choices,
        default=RegistrationStatus.REGISTERED,
    )
    source = models.CharField(
        _("Source"), max_length=20, choices=Source.choices, default=Source.WEBSITE
    )
    referral_code = models.CharField(_("Referral Code"), max_length=50, blank=True)
    special_requirements = models.TextField(_("Special Requirements"), blank=True)

    # Profile
    job_title = models.CharField(_("Job Title"), max_length=200, blank=True)
    industry = models.CharField(
        _("Industry"), max_length=20, choices=Exhibitor.Industry.choices, blank=True
    )
    experience_level = models.CharField(
        _("Experience Level"),
        max_length=20,
        choices=ExperienceLevel.choices,
        blank=True,
    )
    interests = models.JSONField(_("Interests"), default=list, blank=True)
    objectives = models.JSONField(_("Objectives"), default=list, blank=True)
    bio = models.TextField(_("Bio"), blank=True)

    # Check-in
    checked_in = models.BooleanField(_("Checked In"), default=False)
    check_in_time = models.DateTimeField(_("Check-in Time"), null=True, blank=True)
    badge_number = models.CharField(_("Badge Number"), max_length=50, blank=True)
    check_in_method = models.CharField(
        _("Check-in Method"), max_length=20, choices=CheckInMethod.choices, blank=True
    )

    registered_at = models.DateTimeField(_("Registered At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Attendee")
        verbose_name_plural = _("Attendees")
        ordering = ["-registered_at"]
        unique_together = [["user", "expo"]]
        indexes = [
            models.Index(
                fields=["expo", "registration_status"], name="attendee_expo_status_idx"
            ),
            models.Index(fields=["expo", "checked_in"], name="attendee_expo_checkin_idx"),
        ]

    objects = AttendeeQuerySet.as_manager()

    guarded_fields = (
        "registration_status",
        "checked_in",
        "check_in_time",
        "badge_number",
        "check_in_method",
    )

    def __str__(self):
        return f"{self.user.get_full_name()} - {self.expo}"

    @classmethod
    def register(cls, user, expo, **data):
        """Register ``user`` for ``expo`` and count the registration."""
        if not expo.is_registration_open:
            raise ValidationError("Registration is closed for this expo.")
        if cls.objects.filter(user=user, expo=expo).exists():
            raise DuplicateError("You are already registered for this expo.")
        try:
            with transaction.atomic():
                attendee = cls.objects.create(user=user, expo=expo, **data)
                Expo.objects.filter(pk=expo.pk).update(
                    attendees_count=F("attendees_count") + 1,
                    updated_at=timezone.now(),
                )
        except IntegrityError as exc:
            raise DuplicateError("You are already registered for this expo.") from exc
        logger.info(f"User {user.pk} registered for expo {expo.pk}")
        return attendee

    def check_in(self, method=CheckInMethod.MANUAL, badge_number=""):
        """Check in the attendee."""
        now = timezone.now()
        updated = (
            Attendee.objects.filter(pk=self.pk, checked_in=False)
            .exclude(registration_status=self.RegistrationStatus.CANCELLED)
            .update(
                checked_in=True,
                check_in_time=now,
                check_in_method=method,
                badge_number=badge_number,
                registration_status=self.RegistrationStatus.CHECKED_IN,
                updated_at=now,
            )
        )
        self.refresh_from_db()
        if not updated:
            if self.checked_in:
                raise ConflictError("Attendee is already checked in.")
            raise ConflictError("A cancelled registration cannot be checked in.")
        logger.info(f"Attendee {self.pk} checked in via {method}")

    def bookmark_exhibitor(self, exhibitor):
        """Save ``exhibitor`` to the attendee's list; one bookmark per exhibitor."""
        if exhibitor.expo_id != self.expo_id:
            raise ValidationError("Exhibitor does not belong to the same expo.")
        if self.bookmarks.filter(exhibitor=exhibitor).exists():
            raise DuplicateError("Exhibitor already bookmarked.")
        try:
            with transaction.atomic():
                bookmark = ExhibitorBookmark.objects.create(
                    attendee=self, exhibitor=exhibitor
                )
        except IntegrityError as exc:
            raise DuplicateError("Exhibitor already bookmarked.") from exc
        logger.info(f"Attendee {self.pk} bookmarked exhibitor {exhibitor.pk}")
        return bookmark

    def analytics(self):
        registrations = self.session_registrations.all()
        return {
            "checked_in": self.checked_in,
            "check_in_time": self.check_in_time,
            "session_registrations": registrations.count(),
            "sessions_attended": registrations.filter(attended=True).count(),
            "bookmarked_exhibitors": self.bookmarks.count(),
            "session_feedback_submitted": SessionFeedback.objects.filter(
                user_id=self.user_id, session__expo_id=self.expo_id
            ).count(),
            "feedback_submitted": Feedback.objects.filter(
                user_id=self.user_id, expo_id=self.expo_id
            ).count(),
        }


class ScheduleQuerySet(models.QuerySet):
    """Custom queryset for Schedule with useful filters."""

    def upcoming(self):
        return self.filter(date__gte=timezone.localdate()).exclude(
            status=Schedule.Status.CANCELLED
        )

    def by_expo(self, expo):
        return self.filter(expo=expo)

    def by_type(self, session_type):
        return self.filter(session_type=session_type)


class Schedule(GuardedFieldsModel):
    """
    A session on an expo's schedule.

    The roster is the set of :class:`SessionRegistration` rows; its size is
    cached in ``attendee_count`` and bounded by ``max_attendees``.
    """

    class SessionType(models.TextChoices):
        KEYNOTE = "keynote", _("Keynote")
        WORKSHOP = "workshop", _("Workshop")
        PANEL = "panel", _("Panel")
        PRESENTATION = "presentation", _("Presentation")
        NETWORKING = "networking", _("Networking")
        BREAK = "break", _("Break")
        OTHER = "other", _("Other")

    class Status(models.TextChoices):
        SCHEDULED = "scheduled", _("Scheduled")
        ONGOING = "ongoing", _("Ongoing")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expo = models.ForeignKey(
        Expo, on_delete=models.CASCADE, related_name="schedules", verbose_name=_("Expo")
    )
    title = models.CharField(_("Title"), max_length=300)
    description = models.TextField(_("Description"))
    session_type = models.CharField(
        _("Session Type"),
        max_length=20,
        choices=SessionType.choices,
        default=SessionType.PRESENTATION,
    )
    status = models.CharField(
        _("Status"), max_length=20, choices=Status.choices, default=Status.SCHEDULED
    )

    # Time and place
    date = models.DateField(_("Date"))
    start_time = models.TimeField(_("Start Time"))
    end_time = models.TimeField(_("End Time"))
    room = models.CharField(_("Room"), max_length=100)
    room_capacity = models.PositiveIntegerField(_("Room Capacity"), default=0)
    floor = models.CharField(_("Floor"), max_length=50, blank=True)
    building = models.CharField(_("Building"), max_length=100, blank=True)

    speakers = models.JSONField(_("Speakers"), default=list, blank=True)
    topics = models.JSONField(_("Topics"), default=list, blank=True)
    materials = models.JSONField(_("Materials"), default=list, blank=True)
    tags = models.JSONField(_("Tags"), default=list, blank=True)

    # Registration
    max_attendees = models.PositiveIntegerField(_("Max Attendees"))
    registration_required = models.BooleanField(_("Registration Required"), default=True)
    fee = models.DecimalField(_("Fee"), max_digits=10, decimal_places=2, default=0)

    # Derived
    attendee_count = models.PositiveIntegerField(
        _("Attendee Count"), default=0, editable=False
    )
    rating_average = models.FloatField(_("Average Rating"), default=0.0, editable=False)
    rating_count = models.PositiveIntegerField(_("Rating Count"), default=0, editable=False)

    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Schedule")
        verbose_name_plural = _("Schedules")
        ordering = ["date", "start_time"]
        indexes = [
            models.Index(
                fields=["expo", "date", "start_time"], name="schedule_expo_date_idx"
            ),
            models.Index(fields=["expo", "session_type"], name="schedule_expo_type_idx"),
        ]

    objects = ScheduleQuerySet.as_manager()

    guarded_fields = ("attendee_count", "rating_average", "rating_count")

    def __str__(self):
        return f"{self.title} ({self.date})"

    @property
    def available_spots(self):
        return max(0, self.max_attendees - self.attendee_count)

    @property
    def is_full(self):
        return self.attendee_count >= self.max_attendees

    def register(self, user):
        """
        Add ``user``'s expo registration to the roster.

        The seat is taken by a conditional increment in the same transaction
        as the roster row, so the roster never outgrows ``max_attendees``.
        """
        if not self.registration_required:
            raise ValidationError("Registration is not required for this session.")

        current = (
            Schedule.objects.filter(pk=self.pk)
            .values("attendee_count", "max_attendees")
            .first()
        )
        if current is None:
            raise NotFoundError("Session not found.")
        if current["attendee_count"] >= current["max_attendees"]:
            raise CapacityError("Session is full.")
        if self.attendees.filter(attendee__user=user).exists():
            raise DuplicateError("You are already registered for this session.")

        attendee = (
            Attendee.objects.filter(user=user, expo_id=self.expo_id)
            .exclude(registration_status=Attendee.RegistrationStatus.CANCELLED)
            .first()
        )
        if attendee is None:
            raise ValidationError("You must register for the expo first.")

        try:
            with transaction.atomic():
                seated = Schedule.objects.filter(
                    pk=self.pk, attendee_count__lt=F("max_attendees")
                ).update(attendee_count=F("attendee_count") + 1, updated_at=timezone.now())
                if not seated:
                    raise CapacityError("Session is full.")
                registration = SessionRegistration.objects.create(
                    session=self, attendee=attendee
                )
        except IntegrityError as exc:
            raise DuplicateError("You are already registered for this session.") from exc

        self.refresh_from_db(fields=["attendee_count"])
        logger.info(f"User {user.pk} registered for session {self.pk}")
        return registration

    def unregister(self, user):
        """Remove ``user`` from the roster. Returns False if they were not on it."""
        with transaction.atomic():
            deleted, _rows = SessionRegistration.objects.filter(
                session=self, attendee__user=user
            ).delete()
            if deleted:
                Schedule.objects.filter(pk=self.pk, attendee_count__gt=0).update(
                    attendee_count=F("attendee_count") - 1, updated_at=timezone.now()
                )

        self.refresh_from_db(fields=["attendee_count"])
        if deleted:
            logger.info(f"User {user.pk} unregistered from session {self.pk}")
        return bool(deleted)

    def mark_attendance(self, user_id, attended=True):
        updated = SessionRegistration.objects.filter(
            session=self, attendee__user_id=user_id
        ).update(attended=attended)
        if not updated:
            raise NotFoundError("User is not registered for this session.")
        logger.info(f"Attendance for user {user_id} on session {self.pk} set to {attended}")

    def submit_feedback(self, user, rating, comment=""):
        """
        Upsert ``user``'s feedback and recompute the session rating over all
        feedback rows while the session row is locked.
        """
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5.")
        if not self.attendees.filter(attendee__user=user, attended=True).exists():
            raise ValidationError("You must attend the session before leaving feedback.")

        with transaction.atomic():
            session = Schedule.objects.select_for_update().get(pk=self.pk)
            feedback, created = SessionFeedback.objects.update_or_create(
                session=session,
                user=user,
                defaults={"rating": rating, "comment": comment},
            )
            stats = session.feedback.aggregate(average=Avg("rating"), count=Count("id"))
            self.rating_average = round(stats["average"] or 0.0, 2)
            self.rating_count = stats["count"]
            Schedule.objects.filter(pk=self.pk).update(
                rating_average=self.rating_average,
                rating_count=self.rating_count,
                updated_at=timezone.now(),
            )

        logger.info(
            f"Feedback {'created' if created else 'updated'} on session {self.pk} by user {user.pk}"
        )
        return feedback

    def analytics(self):
        registered = self.attendees.count()
        attended = self.attendees.filter(attended=True).count()
        return {
            "total_registered": registered,
            "total_attended": attended,
            "attendance_rate": _rate(attended, registered),
            "average_rating": self.rating_average,
            "total_feedback": self.feedback.count(),
            "capacity": self.max_attendees,
            "occupancy_rate": _rate(registered, self.max_attendees),
        }

    def delete(self, *args, **kwargs):
        if self.attendees.exists():
            raise ConflictError("Cannot delete a session with registered attendees.")
        logger.info(f"Deleting session {self.pk}")
        return super().delete(*args, **kwargs)


class SessionRegistration(models.Model):
    """
    One roster entry. The same row is a session's attendee and an
    attendee's session registration.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(
        Schedule,
        on_delete=models.CASCADE,
        related_name="attendees",
        verbose_name=_("Session"),
    )
    attendee = models.ForeignKey(
        Attendee,
        on_delete=models.CASCADE,
        related_name="session_registrations",
        verbose_name=_("Attendee"),
    )
    registered_at = models.DateTimeField(_("Registered At"), auto_now_add=True)
    attended = models.BooleanField(_("Attended"), default=False)

    class Meta:
        verbose_name = _("Session Registration")
        verbose_name_plural = _("Session Registrations")
        ordering = ["registered_at"]
        unique_together = [["session", "attendee"]]

    def __str__(self):
        return f"{self.attendee.user} @ {self.session.title}"

    @property
    def user(self):
        return self.attendee.user


class SessionFeedback(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(
        Schedule,
        on_delete=models.CASCADE,
        related_name="feedback",
        verbose_name=_("Session"),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="session_feedback",
        verbose_name=_("User"),
    )
    rating = models.PositiveSmallIntegerField(
        _("Rating"), validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(_("Comment"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Session Feedback")
        verbose_name_plural = _("Session Feedback")
        ordering = ["-created_at"]
        unique_together = [["session", "user"]]

    def __str__(self):
        return f"{self.user} rated {self.session.title} {self.rating}/5"


class ExhibitorBookmark(models.Model):
    """An exhibitor saved by an attendee of the same expo."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    attendee = models.ForeignKey(
        Attendee,
        on_delete=models.CASCADE,
        related_name="bookmarks",
        verbose_name=_("Attendee"),
    )
    exhibitor = models.ForeignKey(
        Exhibitor,
        on_delete=models.CASCADE,
        related_name="bookmarks",
        verbose_name=_("Exhibitor"),
    )
    bookmarked_at = models.DateTimeField(_("Bookmarked At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Exhibitor Bookmark")
        verbose_name_plural = _("Exhibitor Bookmarks")
        ordering = ["-bookmarked_at"]
        unique_together = [["attendee", "exhibitor"]]

    def __str__(self):
        return f"{self.attendee.user} -> {self.exhibitor.company_name}"


class FeedbackQuerySet(models.QuerySet):
    def open(self):
        return self.exclude(status__in=Feedback.CLOSED_STATUSES)

    def by_expo(self, expo):
        return self.filter(expo=expo)


class Feedback(GuardedFieldsModel):
    """
    Expo-level feedback or support request raised by a user.

    Handling moves through :meth:`assign`, :meth:`respond`,
    :meth:`resolve` and :meth:`escalate`; the owner can edit the content
    until the request is resolved.
    """

    class Type(models.TextChoices):
        GENERAL = "general", _("General")
        EXPO = "expo", _("Expo")
        SESSION = "session", _("Session")
        EXHIBITOR = "exhibitor", _("Exhibitor")
        BOOTH = "booth", _("Booth")
        VENUE = "venue", _("Venue")
        SUPPORT = "support", _("Support")
        SUGGESTION = "suggestion", _("Suggestion")
        COMPLAINT = "complaint", _("Complaint")

    class Category(models.TextChoices):
        ORGANIZATION = "organization", _("Organization")
        CONTENT = "content", _("Content")
        VENUE = "venue", _("Venue")
        TECHNOLOGY = "technology", _("Technology")
        NETWORKING = "networking", _("Networking")
        CATERING = "catering", _("Catering")
        LOGISTICS = "logistics", _("Logistics")
        STAFF = "staff", _("Staff")
        OTHER = "other", _("Other")

    class Priority(models.TextChoices):
        LOW = "low", _("Low")
        MEDIUM = "medium", _("Medium")
        HIGH = "high", _("High")
        URGENT = "urgent", _("Urgent")

    class Status(models.TextChoices):
        OPEN = "open", _("Open")
        IN_PROGRESS = "in_progress", _("In Progress")
        RESOLVED = "resolved", _("Resolved")
        CLOSED = "closed", _("Closed")
        CANCELLED = "cancelled", _("Cancelled")

    class EntityType(models.TextChoices):
        EXPO = "expo", _("Expo")
        SESSION = "session", _("Session")
        EXHIBITOR = "exhibitor", _("Exhibitor")
        BOOTH = "booth", _("Booth")
        USER = "user", _("User")

    class ContactPreference(models.TextChoices):
        EMAIL = "email", _("Email")
        PHONE = "phone", _("Phone")
        IN_APP = "in_app", _("In App")
        NO_CONTACT = "no_contact", _("No Contact")

    CLOSED_STATUSES = [Status.RESOLVED, Status.CLOSED, Status.CANCELLED]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="expo_feedback",
        verbose_name=_("User"),
    )
    expo = models.ForeignKey(
        Expo,
        on_delete=models.CASCADE,
        related_name="feedback",
        verbose_name=_("Expo"),
    )
    type = models.CharField(_("Type"), max_length=20, choices=Type.choices)
    subject = models.CharField(_("Subject"), max_length=300)
    message = models.TextField(_("Message"))
    rating = models.PositiveSmallIntegerField(
        _("Rating"),
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    category = models.CharField(
        _("Category"), max_length=20, choices=Category.choices, blank=True
    )
    priority = models.CharField(
        _("Priority"), max_length=10, choices=Priority.choices, default=Priority.MEDIUM
    )
    status = models.CharField(
        _("Status"), max_length=20, choices=Status.choices, default=Status.OPEN
    )
    related_entity_type = models.CharField(
        _("Related Entity Type"), max_length=20, choices=EntityType.choices, blank=True
    )
    related_entity_id = models.CharField(
        _("Related Entity ID"), max_length=64, blank=True
    )
    attachments = models.JSONField(_("Attachments"), default=list, blank=True)
    tags = models.JSONField(_("Tags"), default=list, blank=True)
    is_anonymous = models.BooleanField(_("Is Anonymous"), default=False)
    is_public = models.BooleanField(_("Is Public"), default=False)
    contact_preference = models.CharField(
        _("Contact Preference"),
        max_length=20,
        choices=ContactPreference.choices,
        default=ContactPreference.EMAIL,
    )
    follow_up_required = models.BooleanField(_("Follow-up Required"), default=False)
    follow_up_date = models.DateTimeField(_("Follow-up Date"), null=True, blank=True)

    # Handling
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_feedback",
        verbose_name=_("Assigned To"),
    )
    assigned_at = models.DateTimeField(_("Assigned At"), null=True, blank=True)
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="resolved_feedback",
        verbose_name=_("Resolved By"),
    )
    resolved_at = models.DateTimeField(_("Resolved At"), null=True, blank=True)
    resolution = models.TextField(_("Resolution"), blank=True)
    escalated = models.BooleanField(_("Escalated"), default=False)
    escalated_at = models.DateTimeField(_("Escalated At"), null=True, blank=True)
    escalated_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="escalated_feedback",
        verbose_name=_("Escalated To"),
    )

    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Feedback")
        verbose_name_plural = _("Feedback")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["expo", "type"], name="feedback_expo_type_idx"),
            models.Index(fields=["expo", "status"], name="feedback_expo_status_idx"),
            models.Index(fields=["assigned_to", "status"], name="feedback_assignee_idx"),
            models.Index(fields=["priority", "status"], name="feedback_priority_idx"),
        ]

    objects = FeedbackQuerySet.as_manager()

    guarded_fields = (
        "status",
        "assigned_to",
        "assigned_at",
        "resolved_by",
        "resolved_at",
        "resolution",
        "escalated",
        "escalated_at",
        "escalated_to",
    )

    def __str__(self):
        return f"{self.subject} ({self.status})"

    @property
    def is_resolved(self):
        return self.status in [self.Status.RESOLVED, self.Status.CLOSED]

    @property
    def response_count(self):
        return self.responses.count()

    @property
    def needs_attention(self):
        if self.escalated:
            return True
        if self.priority == self.Priority.URGENT and not self.is_resolved:
            return True
        stale = timezone.now() - self.created_at > timedelta(days=2)
        return self.status == self.Status.OPEN and stale

    def _ensure_active(self, operation):
        if self.status in self.CLOSED_STATUSES:
            raise ConflictError(f"{self.status.capitalize()} feedback cannot be {operation}.")

    def assign(self, assignee):
        self._ensure_active("assigned")
        self.assigned_to = assignee
        self.assigned_at = timezone.now()
        self.status = self.Status.IN_PROGRESS
        self.save(update_fields=["assigned_to", "assigned_at", "status", "updated_at"])
        logger.info(f"Feedback {self.pk} assigned to user {assignee.pk}")

    def respond(self, user, message, is_internal=False):
        """Append a response; the first one moves open feedback to in progress."""
        with transaction.atomic():
            response = FeedbackResponse.objects.create(
                feedback=self, responded_by=user, message=message, is_internal=is_internal
            )
            if self.status == self.Status.OPEN:
                self.status = self.Status.IN_PROGRESS
                self.save(update_fields=["status", "updated_at"])
        logger.info(f"Feedback {self.pk} answered by user {user.pk}")
        return response

    def resolve(self, user, resolution=""):
        self._ensure_active("resolved")
        self.status = self.Status.RESOLVED
        self.resolved_by = user
        self.resolved_at = timezone.now()
        self.resolution = resolution
        self.save(
            update_fields=["status", "resolved_by", "resolved_at", "resolution", "updated_at"]
        )
        logger.info(f"Feedback {self.pk} resolved by user {user.pk}")

    def escalate(self, escalated_to=None):
        """Flag the feedback, raise it to urgent and optionally hand it to a user."""
        self._ensure_active("escalated")
        self.escalated = True
        self.escalated_at = timezone.now()
        self.escalated_to = escalated_to
        self.priority = self.Priority.URGENT
        self.save(
            update_fields=[
                "escalated",
                "escalated_at",
                "escalated_to",
                "priority",
                "updated_at",
            ]
        )
        logger.warning(f"Feedback {self.pk} escalated")

    @classmethod
    def analytics_for(cls, expo):
        feedback = cls.objects.filter(expo=expo)

        def breakdown(field):
            return {
                row[field]: row["count"]
                for row in feedback.values(field).annotate(count=Count("id"))
            }

        resolution_hours = [
            (resolved_at - created_at).total_seconds() / 3600
            for created_at, resolved_at in feedback.filter(
                resolved_at__isnull=False
            ).values_list("created_at", "resolved_at")
        ]
        average_rating = feedback.aggregate(average=Avg("rating"))["average"]

        return {
            "total": feedback.count(),
            "by_status": breakdown("status"),
            "by_type": breakdown("type"),
            "by_priority": breakdown("priority"),
            "average_rating": round(average_rating or 0, 2),
            "average_response_time_hours": (
                round(sum(resolution_hours) / len(resolution_hours), 2)
                if resolution_hours
                else 0
            ),
        }


class FeedbackResponse(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    feedback = models.ForeignKey(
        Feedback,
        on_delete=models.CASCADE,
        related_name="responses",
        verbose_name=_("Feedback"),
    )
    responded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="feedback_responses",
        verbose_name=_("Responded By"),
    )
    message = models.TextField(_("Message"))
    is_internal = models.BooleanField(_("Internal"), default=False)
    responded_at = models.DateTimeField(_("Responded At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Feedback Response")
        verbose_name_plural = _("Feedback Responses")
        ordering = ["responded_at"]

    def __str__(self):
        return f"Response to {self.feedback.subject} by {self.responded_by}"
