import uuid

from django.db import transaction
from rest_framework import serializers

from apps.accounts.models import User
from apps.accounts.serializers import UserMinimalSerializer

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
from .permissions import can_manage_expo

BOOTH_AMENITIES = [
    "power",
    "internet",
    "water",
    "storage",
    "lighting",
    "carpet",
    "furniture",
]


class ExpoSerializer(serializers.ModelSerializer):
    """Read serializer for expos, including the derived counters."""

    organizer = UserMinimalSerializer(read_only=True)
    available_booths = serializers.IntegerField(read_only=True)
    is_registration_open = serializers.BooleanField(read_only=True)
    is_active = serializers.BooleanField(read_only=True)

    class Meta:
        model = Expo
        fields = [
            "id",
            "title",
            "description",
            "theme",
            "category",
            "status",
            "organizer",
            "start_date",
            "end_date",
            "registration_deadline",
            "venue",
            "address",
            "city",
            "state",
            "zip_code",
            "country",
            "max_capacity",
            "registration_fee",
            "booth_price",
            "total_booths",
            "booked_booths",
            "available_booths",
            "exhibitors_count",
            "attendees_count",
            "floor_plan_url",
            "featured_image",
            "tags",
            "is_public",
            "is_registration_open",
            "is_active",
            "published_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ExpoWriteSerializer(serializers.ModelSerializer):
    """
    Create/update serializer for expos. Status and counters are not
    writable here; status changes go through the publish action.
    """

    class Meta:
        model = Expo
        fields = [
            "title",
            "description",
            "theme",
            "category",
            "start_date",
            "end_date",
            "registration_deadline",
            "venue",
            "address",
            "city",
            "state",
            "zip_code",
            "country",
            "max_capacity",
            "registration_fee",
            "booth_price",
            "total_booths",
            "floor_plan_url",
            "featured_image",
            "tags",
            "is_public",
        ]

    def validate_total_booths(self, value):
        if self.instance is not None:
            existing = self.instance.booths.count()
            if value < existing:
                raise serializers.ValidationError(
                    f"Expo already has {existing} booths; total booths cannot be lower."
                )
        return value

    def validate(self, attrs):
        errors = {}

        start_date = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end_date = attrs.get("end_date", getattr(self.instance, "end_date", None))
        deadline = attrs.get(
            "registration_deadline",
            getattr(self.instance, "registration_deadline", None),
        )

        if start_date and end_date and start_date >= end_date:
            errors["end_date"] = "End date must be after start date."
        if deadline and end_date and deadline > end_date:
            errors["registration_deadline"] = (
                "Registration deadline must not be after the expo ends."
            )

        for field in ["registration_fee", "booth_price"]:
            if attrs.get(field) is not None and attrs[field] < 0:
                errors[field] = "Amount cannot be negative."

        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def create(self, validated_data):
        validated_data["organizer"] = self.context["request"].user
        return super().create(validated_data)

    def to_representation(self, instance):
        return ExpoSerializer(instance, context=self.context).data


class BoothExhibitorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Exhibitor
        fields = ["id", "company_name", "application_status"]


class BoothSerializer(serializers.ModelSerializer):
    """Read serializer for booths; ``status`` is the effective status."""

    status = serializers.CharField(source="effective_status", read_only=True)
    stored_status = serializers.CharField(source="status", read_only=True)
    exhibitor = BoothExhibitorSerializer(read_only=True)
    area = serializers.FloatField(read_only=True)

    class Meta:
        model = Booth
        fields = [
            "id",
            "expo",
            "booth_number",
            "status",
            "stored_status",
            "exhibitor",
            "reserved_until",
            "booth_details",
            "width",
            "height",
            "unit",
            "area",
            "position_x",
            "position_y",
            "category",
            "amenities",
            "price",
            "description",
            "setup_requirements",
            "visitors_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BoothWriteSerializer(serializers.ModelSerializer):
    """
    Create/update serializer for booth layout data. Lifecycle fields
    (status, exhibitor, reservation, booking details) are excluded.
    """

    class Meta:
        model = Booth
        fields = [
            "expo",
            "booth_number",
            "width",
            "height",
            "unit",
            "position_x",
            "position_y",
            "category",
            "amenities",
            "price",
            "description",
            "setup_requirements",
        ]

    def validate_expo(self, value):
        if self.instance is not None and value.pk != self.instance.expo_id:
            raise serializers.ValidationError("A booth cannot be moved to another expo.")
        return value

    def validate_amenities(self, value):
        invalid = [item for item in value if item not in BOOTH_AMENITIES]
        if invalid:
            raise serializers.ValidationError(f"Unknown amenities: {invalid}")
        return value

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value

    def validate(self, attrs):
        if self.instance is None:
            attrs["expo"].ensure_booth_capacity()
        return attrs

    def to_representation(self, instance):
        return BoothSerializer(instance, context=self.context).data


class BoothItemSerializer(BoothWriteSerializer):
    """One booth of a bulk payload; the expo is given once for the batch."""

    class Meta(BoothWriteSerializer.Meta):
        fields = [field for field in BoothWriteSerializer.Meta.fields if field != "expo"]
        validators = []

    def validate(self, attrs):
        return attrs


class BoothBulkCreateSerializer(serializers.Serializer):
    expo = serializers.PrimaryKeyRelatedField(queryset=Expo.objects.all())
    booths = BoothItemSerializer(many=True, allow_empty=False)

    def validate(self, attrs):
        expo = attrs["expo"]
        numbers = [booth["booth_number"] for booth in attrs["booths"]]
        duplicates = sorted({number for number in numbers if numbers.count(number) > 1})
        if duplicates:
            raise serializers.ValidationError(
                {"booths": f"Duplicate booth numbers in request: {duplicates}"}
            )
        taken = list(
            expo.booths.filter(booth_number__in=numbers).values_list(
                "booth_number", flat=True
            )
        )
        if taken:
            raise serializers.ValidationError(
                {"booths": f"Booth numbers already exist: {sorted(taken)}"}
            )
        expo.ensure_booth_capacity(len(numbers))
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        expo = validated_data["expo"]
        return Booth.objects.bulk_create(
            [Booth(expo=expo, **booth) for booth in validated_data["booths"]]
        )


class BoothReserveSerializer(serializers.Serializer):
    reservation_duration = serializers.IntegerField(
        required=False, help_text="Reservation length in minutes."
    )


class BoothBookSerializer(serializers.Serializer):
    exhibitor_id = serializers.UUIDField()
    booth_details = serializers.JSONField(required=False, default=dict)

    def validate_booth_details(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Booth details must be an object.")
        return value


class ExhibitorSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)
    assigned_booth_number = serializers.CharField(
        source="assigned_booth.booth_number", read_only=True, default=None
    )

    class Meta:
        model = Exhibitor
        fields = [
            "id",
            "user",
            "expo",
            "company_name",
            "company_description",
            "industry",
            "website",
            "logo",
            "founded_year",
            "employee_count",
            "headquarters",
            "contact_name",
            "contact_title",
            "contact_email",
            "contact_phone",
            "alternate_contact",
            "products_services",
            "booth_requirements",
            "staff_members",
            "social_media",
            "application_status",
            "applied_at",
            "reviewed_by",
            "reviewed_at",
            "review_notes",
            "assigned_booth",
            "assigned_booth_number",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


EXHIBITOR_PROFILE_FIELDS = [
    "company_name",
    "company_description",
    "industry",
    "website",
    "logo",
    "founded_year",
    "employee_count",
    "headquarters",
    "contact_name",
    "contact_title",
    "contact_email",
    "contact_phone",
    "alternate_contact",
    "products_services",
    "booth_requirements",
    "staff_members",
    "social_media",
    "notes",
]


class ExhibitorApplySerializer(serializers.ModelSerializer):
    class Meta:
        model = Exhibitor
        fields = ["expo"] + EXHIBITOR_PROFILE_FIELDS
        # Duplicate applications are reported by Exhibitor.apply
        validators = []

    def create(self, validated_data):
        expo = validated_data.pop("expo")
        return Exhibitor.apply(self.context["request"].user, expo, **validated_data)

    def to_representation(self, instance):
        return ExhibitorSerializer(instance, context=self.context).data


class ExhibitorUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Exhibitor
        fields = EXHIBITOR_PROFILE_FIELDS

    def to_representation(self, instance):
        return ExhibitorSerializer(instance, context=self.context).data


class ExhibitorReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Exhibitor.ApplicationStatus.choices)
    review_notes = serializers.CharField(required=False, allow_blank=True, default="")


class AssignBoothSerializer(serializers.Serializer):
    booth_id = serializers.UUIDField()


class AttendeeSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Attendee
        fields = [
            "id",
            "user",
            "expo",
            "ticket_type",
            "registration_status",
            "source",
            "referral_code",
            "special_requirements",
            "job_title",
            "industry",
            "experience_level",
            "interests",
            "objectives",
            "bio",
            "checked_in",
            "check_in_time",
            "badge_number",
            "check_in_method",
            "registered_at",
            "updated_at",
        ]
        read_only_fields = fields


ATTENDEE_PROFILE_FIELDS = [
    "special_requirements",
    "job_title",
    "industry",
    "experience_level",
    "interests",
    "objectives",
    "bio",
]


class AttendeeRegisterSerializer(serializers.ModelSerializer):
    class Meta:
        model = Attendee
        fields = ["expo", "ticket_type", "source", "referral_code"] + ATTENDEE_PROFILE_FIELDS
        validators = []

    def create(self, validated_data):
        expo = validated_data.pop("expo")
        return Attendee.register(self.context["request"].user, expo, **validated_data)

    def to_representation(self, instance):
        return AttendeeSerializer(instance, context=self.context).data


class AttendeeUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Attendee
        fields = ATTENDEE_PROFILE_FIELDS

    def to_representation(self, instance):
        return AttendeeSerializer(instance, context=self.context).data


class CheckInSerializer(serializers.Serializer):
    check_in_method = serializers.ChoiceField(
        choices=Attendee.CheckInMethod.choices, default=Attendee.CheckInMethod.MANUAL
    )
    badge_number = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=50
    )


class ScheduleSerializer(serializers.ModelSerializer):
    available_spots = serializers.IntegerField(read_only=True)
    is_full = serializers.BooleanField(read_only=True)

    class Meta:
        model = Schedule
        fields = [
            "id",
            "expo",
            "title",
            "description",
            "session_type",
            "status",
            "date",
            "start_time",
            "end_time",
            "room",
            "room_capacity",
            "floor",
            "building",
            "speakers",
            "topics",
            "materials",
            "tags",
            "max_attendees",
            "registration_required",
            "fee",
            "attendee_count",
            "available_spots",
            "is_full",
            "rating_average",
            "rating_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ScheduleWriteSerializer(serializers.ModelSerializer):
    """Create/update serializer for sessions; roster and rating are derived."""

    class Meta:
        model = Schedule
        fields = [
            "expo",
            "title",
            "description",
            "session_type",
            "status",
            "date",
            "start_time",
            "end_time",
            "room",
            "room_capacity",
            "floor",
            "building",
            "speakers",
            "topics",
            "materials",
            "tags",
            "max_attendees",
            "registration_required",
            "fee",
        ]

    def validate_expo(self, value):
        if self.instance is not None and value.pk != self.instance.expo_id:
            raise serializers.ValidationError("A session cannot be moved to another expo.")
        return value

    def validate_max_attendees(self, value):
        if self.instance is not None and value < self.instance.attendee_count:
            raise serializers.ValidationError(
                f"{self.instance.attendee_count} attendees are already registered."
            )
        return value

    def validate(self, attrs):
        start_time = attrs.get("start_time", getattr(self.instance, "start_time", None))
        end_time = attrs.get("end_time", getattr(self.instance, "end_time", None))
        if start_time and end_time and start_time >= end_time:
            raise serializers.ValidationError(
                {"end_time": "End time must be after start time."}
            )
        return attrs

    def to_representation(self, instance):
        return ScheduleSerializer(instance, context=self.context).data


class SessionRegistrationSerializer(serializers.ModelSerializer):
    session = ScheduleSerializer(read_only=True)
    user = UserMinimalSerializer(source="attendee.user", read_only=True)

    class Meta:
        model = SessionRegistration
        fields = ["id", "session", "user", "attendee", "registered_at", "attended"]
        read_only_fields = fields


class RosterEntrySerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(source="attendee.user", read_only=True)

    class Meta:
        model = SessionRegistration
        fields = ["id", "user", "attendee", "registered_at", "attended"]
        read_only_fields = fields


class AttendanceSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    attended = serializers.BooleanField(default=True)


class SessionFeedbackSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = SessionFeedback
        fields = ["id", "session", "user", "rating", "comment", "created_at", "updated_at"]
        read_only_fields = ["id", "session", "user", "created_at", "updated_at"]
        extra_kwargs = {"comment": {"required": False}}


class MySessionsQuerySerializer(serializers.Serializer):
    expo = serializers.UUIDField()
    upcoming = serializers.BooleanField(required=False)
    attended = serializers.BooleanField(required=False, allow_null=True)


class RecomputeCountersSerializer(serializers.Serializer):
    dry_run = serializers.BooleanField(required=False, default=False)


class BookmarkSerializer(serializers.Serializer):
    exhibitor_id = serializers.UUIDField()


class ExhibitorBookmarkSerializer(serializers.ModelSerializer):
    exhibitor = BoothExhibitorSerializer(read_only=True)

    class Meta:
        model = ExhibitorBookmark
        fields = ["id", "attendee", "exhibitor", "bookmarked_at"]
        read_only_fields = fields


class FeedbackResponseSerializer(serializers.ModelSerializer):
    responded_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = FeedbackResponse
        fields = ["id", "responded_by", "message", "is_internal", "responded_at"]
        read_only_fields = fields


class FeedbackSerializer(serializers.ModelSerializer):
    """
    Read serializer for expo feedback. Internal responses are shown to expo
    managers only and anonymous feedback hides its author from everyone but
    the author.
    """

    user = UserMinimalSerializer(read_only=True)
    assigned_to = UserMinimalSerializer(read_only=True)
    resolved_by = UserMinimalSerializer(read_only=True)
    escalated_to = UserMinimalSerializer(read_only=True)
    responses = serializers.SerializerMethodField()
    response_count = serializers.IntegerField(read_only=True)
    is_resolved = serializers.BooleanField(read_only=True)
    needs_attention = serializers.BooleanField(read_only=True)

    class Meta:
        model = Feedback
        fields = [
            "id",
            "user",
            "expo",
            "type",
            "subject",
            "message",
            "rating",
            "category",
            "priority",
            "status",
            "related_entity_type",
            "related_entity_id",
            "attachments",
            "tags",
            "is_anonymous",
            "is_public",
            "contact_preference",
            "follow_up_required",
            "follow_up_date",
            "assigned_to",
            "assigned_at",
            "resolved_by",
            "resolved_at",
            "resolution",
            "escalated",
            "escalated_at",
            "escalated_to",
            "responses",
            "response_count",
            "is_resolved",
            "needs_attention",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def _viewer(self):
        request = self.context.get("request")
        return getattr(request, "user", None)

    def get_responses(self, obj):
        responses = obj.responses.select_related("responded_by")
        if not can_manage_expo(self._viewer(), obj.expo):
            responses = responses.filter(is_internal=False)
        return FeedbackResponseSerializer(responses, many=True).data

    def to_representation(self, instance):
        data = super().to_representation(instance)
        viewer = self._viewer()
        if instance.is_anonymous and (viewer is None or viewer.pk != instance.user_id):
            data["user"] = None
        return data


FEEDBACK_CONTENT_FIELDS = [
    "subject",
    "message",
    "rating",
    "category",
    "priority",
    "attachments",
    "tags",
    "is_public",
    "contact_preference",
    "follow_up_required",
    "follow_up_date",
]


class FeedbackCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Feedback
        fields = [
            "expo",
            "type",
            "related_entity_type",
            "related_entity_id",
            "is_anonymous",
        ] + FEEDBACK_CONTENT_FIELDS

    def validate(self, attrs):
        entity_type = attrs.get("related_entity_type", "")
        entity_id = attrs.get("related_entity_id", "")
        if bool(entity_type) != bool(entity_id):
            raise serializers.ValidationError(
                {"related_entity_id": "Related entity type and id go together."}
            )
        if entity_type and not self._related_entity_exists(
            attrs["expo"], entity_type, entity_id
        ):
            raise serializers.ValidationError(
                {"related_entity_id": f"No {entity_type} {entity_id} in this expo."}
            )
        return attrs

    def _related_entity_exists(self, expo, entity_type, entity_id):
        if entity_type == Feedback.EntityType.USER:
            return entity_id.isdigit() and User.objects.filter(pk=entity_id).exists()
        try:
            pk = uuid.UUID(entity_id)
        except ValueError:
            return False
        if entity_type == Feedback.EntityType.EXPO:
            return pk == expo.pk
        models_by_type = {"session": Schedule, "exhibitor": Exhibitor, "booth": Booth}
        return models_by_type[str(entity_type)].objects.filter(pk=pk, expo=expo).exists()

    def create(self, validated_data):
        validated_data["user"] = self.context["request"].user
        return super().create(validated_data)

    def to_representation(self, instance):
        return FeedbackSerializer(instance, context=self.context).data


class FeedbackUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Feedback
        fields = FEEDBACK_CONTENT_FIELDS

    def validate(self, attrs):
        user = self.context["request"].user
        if (
            self.instance.is_resolved
            and self.instance.user_id == user.pk
            and not can_manage_expo(user, self.instance.expo)
        ):
            raise serializers.ValidationError("Cannot update resolved feedback.")
        return attrs

    def to_representation(self, instance):
        return FeedbackSerializer(instance, context=self.context).data


class FeedbackAssignSerializer(serializers.Serializer):
    assigned_to = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())


class FeedbackRespondSerializer(serializers.Serializer):
    message = serializers.CharField()
    is_internal = serializers.BooleanField(default=False)


class FeedbackResolveSerializer(serializers.Serializer):
    resolution = serializers.CharField(required=False, allow_blank=True, default="")


class FeedbackEscalateSerializer(serializers.Serializer):
    escalated_to = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.all(), required=False, allow_null=True, default=None
    )
