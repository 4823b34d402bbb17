import logging

from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiTypes,
    extend_schema,
    extend_schema_view,
)
from guardian.shortcuts import assign_perm, get_objects_for_user
from rest_framework import filters, permissions, status, viewsets
from rest_framework.decorators import action

from apps.common.exceptions import NotFoundError
from apps.common.mixins import EnvelopeResponseMixin

from .filters import (
    AttendeeFilter,
    BoothFilter,
    ExhibitorFilter,
    ExpoFilter,
    FeedbackFilter,
    ScheduleFilter,
)
from .models import Attendee, Booth, Exhibitor, Expo, Feedback, Schedule
from .permissions import (
    CanHandleFeedback,
    CanManageExpo,
    IsExhibitorOrHigher,
    IsOrganizerOrAdmin,
    IsOwner,
    IsOwnerOrExpoManager,
    authorize_expo_management,
)
from .serializers import (
    AssignBoothSerializer,
    AttendanceSerializer,
    AttendeeRegisterSerializer,
    AttendeeSerializer,
    AttendeeUpdateSerializer,
    BookmarkSerializer,
    BoothBookSerializer,
    BoothBulkCreateSerializer,
    BoothReserveSerializer,
    BoothSerializer,
    BoothWriteSerializer,
    CheckInSerializer,
    ExhibitorApplySerializer,
    ExhibitorBookmarkSerializer,
    ExhibitorReviewSerializer,
    ExhibitorSerializer,
    ExhibitorUpdateSerializer,
    ExpoSerializer,
    ExpoWriteSerializer,
    FeedbackAssignSerializer,
    FeedbackCreateSerializer,
    FeedbackEscalateSerializer,
    FeedbackResolveSerializer,
    FeedbackRespondSerializer,
    FeedbackSerializer,
    FeedbackUpdateSerializer,
    MySessionsQuerySerializer,
    RecomputeCountersSerializer,
    RosterEntrySerializer,
    ScheduleSerializer,
    ScheduleWriteSerializer,
    SessionFeedbackSerializer,
    SessionRegistrationSerializer,
)

logger = logging.getLogger(__name__)


def granted_expos(user):
    """Expos the user holds an explicit ``change_expo`` object permission on."""
    return get_objects_for_user(
        user, "expos.change_expo", klass=Expo, accept_global_perms=False
    ).values("pk")


def visible_expos(user):
    return Expo.objects.visible_to(user) | Expo.objects.filter(pk__in=granted_expos(user))


def managed_expos(user):
    if user.is_platform_admin:
        return Expo.objects.all()
    return Expo.objects.filter(Q(organizer=user) | Q(pk__in=granted_expos(user)))


@extend_schema_view(
    list=extend_schema(
        summary="List expos",
        description="Public published expos plus the expos the caller manages.",
    ),
    retrieve=extend_schema(summary="Get expo details"),
    create=extend_schema(
        summary="Create expo",
        description="Create a new expo. Only organizers and admins can create expos.",
    ),
    update=extend_schema(summary="Update expo"),
    partial_update=extend_schema(summary="Partially update expo"),
    destroy=extend_schema(
        summary="Delete expo",
        description="Fails while the expo has approved exhibitors or active attendees.",
    ),
)
class ExpoViewSet(EnvelopeResponseMixin, viewsets.ModelViewSet):
    """
    ViewSet for expos, their publication, analytics and counter reconciliation.
    """

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_class = ExpoFilter
    search_fields = ["title", "description", "theme", "venue", "city"]
    ordering_fields = ["start_date", "end_date", "created_at", "title"]
    ordering = ["-start_date"]
    envelope_messages = {
        "list": "Expos retrieved successfully",
        "retrieve": "Expo retrieved successfully",
        "create": "Expo created successfully",
        "update": "Expo updated successfully",
        "partial_update": "Expo updated successfully",
        "destroy": "Expo deleted successfully",
    }

    def get_serializer_class(self):
        if self.action in ["create", "update", "partial_update"]:
            return ExpoWriteSerializer
        return ExpoSerializer

    def get_queryset(self):
        return visible_expos(self.request.user).select_related("organizer")

    def get_permissions(self):
        if self.action == "create":
            permission_classes = [permissions.IsAuthenticated, IsOrganizerOrAdmin]
        elif self.action in [
            "update",
            "partial_update",
            "destroy",
            "publish",
            "analytics",
            "feedback_analytics",
            "recompute_counters",
        ]:
            permission_classes = [permissions.IsAuthenticated, CanManageExpo]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def perform_create(self, serializer):
        """Create the expo and grant its creator object permissions."""
        expo = serializer.save()
        assign_perm("expos.change_expo", self.request.user, expo)
        assign_perm("expos.delete_expo", self.request.user, expo)
        logger.info(f"Expo created: {expo.title} by {self.request.user.username}")

    def perform_update(self, serializer):
        expo = serializer.save()
        logger.info(f"Expo updated: {expo.pk} by {self.request.user.username}")

    @extend_schema(
        summary="Publish expo",
        request=None,
        responses={200: ExpoSerializer},
    )
    @action(detail=True, methods=["post"])
    def publish(self, request, pk=None):
        expo = self.get_object()
        expo.publish()
        return self.respond(
            ExpoSerializer(expo, context=self.get_serializer_context()).data,
            "Expo published successfully",
        )

    @extend_schema(
        summary="Expo analytics",
        description="Counts from full scans, breakdowns and a counter consistency flag.",
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=True, methods=["get"])
    def analytics(self, request, pk=None):
        expo = self.get_object()
        return self.respond(expo.analytics(), "Expo analytics retrieved successfully")

    @extend_schema(
        summary="Expo feedback analytics",
        description="Feedback counts by status, type and priority, average rating and resolution time.",
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=True, methods=["get"], url_path="feedback-analytics")
    def feedback_analytics(self, request, pk=None):
        expo = self.get_object()
        return self.respond(
            Feedback.analytics_for(expo), "Feedback analytics retrieved successfully"
        )

    @extend_schema(
        summary="Recompute expo counters",
        description="Rebuild the expo and session counters from scans and report the drift.",
        request=RecomputeCountersSerializer,
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=True, methods=["post"], url_path="recompute-counters")
    def recompute_counters(self, request, pk=None):
        expo = self.get_object()
        serializer = RecomputeCountersSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = expo.recompute_counters(commit=not serializer.validated_data["dry_run"])
        return self.respond(report, "Expo counters recomputed")

    @extend_schema(summary="Expo floor plan", responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"], url_path="floor-plan")
    def floor_plan(self, request, pk=None):
        expo = self.get_object()
        return self.respond(
            {
                "expo": {
                    "id": str(expo.pk),
                    "title": expo.title,
                    "floor_plan_url": expo.floor_plan_url,
                },
                "booths": expo.floor_plan(),
            },
            "Floor plan retrieved successfully",
        )

    @extend_schema(summary="Expos I manage", responses={200: ExpoSerializer(many=True)})
    @action(detail=False, methods=["get"])
    def mine(self, request):
        queryset = self.filter_queryset(managed_expos(request.user))
        serializer = ExpoSerializer(
            queryset, many=True, context=self.get_serializer_context()
        )
        return self.respond(serializer.data, "Expos retrieved successfully")


@extend_schema_view(
    list=extend_schema(summary="List booths"),
    retrieve=extend_schema(summary="Get booth details"),
    create=extend_schema(summary="Create booth"),
    update=extend_schema(summary="Update booth layout"),
    partial_update=extend_schema(summary="Partially update booth layout"),
    destroy=extend_schema(
        summary="Delete booth", description="Booked booths cannot be deleted."
    ),
)
class BoothViewSet(EnvelopeResponseMixin, viewsets.ModelViewSet):
    """
    ViewSet for booths and their reserve / book / release lifecycle.
    """

    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = BoothFilter
    ordering_fields = ["booth_number", "price", "created_at"]
    ordering = ["booth_number"]
    envelope_messages = {
        "list": "Booths retrieved successfully",
        "retrieve": "Booth retrieved successfully",
        "create": "Booth created successfully",
        "update": "Booth updated successfully",
        "partial_update": "Booth updated successfully",
        "destroy": "Booth deleted successfully",
    }

    def get_serializer_class(self):
        if self.action in ["create", "update", "partial_update"]:
            return BoothWriteSerializer
        if self.action == "bulk":
            return BoothBulkCreateSerializer
        if self.action == "reserve":
            return BoothReserveSerializer
        if self.action == "book":
            return BoothBookSerializer
        return BoothSerializer

    def get_queryset(self):
        return Booth.objects.filter(
            expo__in=visible_expos(self.request.user)
        ).select_related("expo", "exhibitor")

    def get_permissions(self):
        if self.action in ["update", "partial_update", "destroy", "book", "release"]:
            permission_classes = [permissions.IsAuthenticated, CanManageExpo]
        elif self.action == "reserve":
            permission_classes = [permissions.IsAuthenticated, IsExhibitorOrHigher]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def perform_create(self, serializer):
        authorize_expo_management(self.request.user, serializer.validated_data["expo"])
        booth = serializer.save()
        logger.info(f"Booth {booth.booth_number} created on expo {booth.expo_id}")

    def respond_booth(self, booth, message):
        return self.respond(
            BoothSerializer(booth, context=self.get_serializer_context()).data, message
        )

    @extend_schema(
        summary="Bulk create booths",
        request=BoothBulkCreateSerializer,
        responses={201: BoothSerializer(many=True)},
    )
    @action(detail=False, methods=["post"])
    def bulk(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        authorize_expo_management(request.user, serializer.validated_data["expo"])
        booths = serializer.save()
        logger.info(
            f"{len(booths)} booths created on expo {serializer.validated_data['expo'].pk}"
        )
        return self.respond(
            BoothSerializer(booths, many=True, context=self.get_serializer_context()).data,
            f"{len(booths)} booths created successfully",
            status.HTTP_201_CREATED,
        )

    @extend_schema(
        summary="Reserve booth",
        description="Hold an available booth (or one whose reservation expired).",
        request=BoothReserveSerializer,
        responses={200: BoothSerializer},
    )
    @action(detail=True, methods=["post"])
    def reserve(self, request, pk=None):
        booth = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booth.reserve(serializer.validated_data.get("reservation_duration"))
        return self.respond_booth(booth, "Booth reserved successfully")

    @extend_schema(
        summary="Book booth",
        description="Book the booth for an approved exhibitor of the same expo.",
        request=BoothBookSerializer,
        responses={200: BoothSerializer},
    )
    @action(detail=True, methods=["post"])
    def book(self, request, pk=None):
        booth = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        exhibitor = Exhibitor.objects.filter(
            pk=serializer.validated_data["exhibitor_id"]
        ).first()
        if exhibitor is None:
            raise NotFoundError("Exhibitor not found.")
        booth.book(exhibitor, serializer.validated_data["booth_details"])
        return self.respond_booth(booth, "Booth booked successfully")

    @extend_schema(summary="Release booth", request=None, responses={200: BoothSerializer})
    @action(detail=True, methods=["post"])
    def release(self, request, pk=None):
        booth = self.get_object()
        booth.release()
        return self.respond_booth(booth, "Booth released successfully")


@extend_schema_view(
    list=extend_schema(
        summary="List exhibitors",
        description="Own applications, applications to managed expos and approved exhibitors.",
    ),
    retrieve=extend_schema(summary="Get exhibitor application"),
    create=extend_schema(summary="Apply as exhibitor"),
    update=extend_schema(summary="Update exhibitor application"),
    partial_update=extend_schema(summary="Partially update exhibitor application"),
)
class ExhibitorViewSet(EnvelopeResponseMixin, viewsets.ModelViewSet):
    """
    ViewSet for exhibitor applications, their review and booth assignment.
    """

    http_method_names = ["get", "post", "put", "patch", "head", "options"]
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_class = ExhibitorFilter
    search_fields = ["company_name", "company_description"]
    ordering_fields = ["applied_at", "company_name"]
    ordering = ["-applied_at"]
    envelope_messages = {
        "list": "Exhibitors retrieved successfully",
        "retrieve": "Exhibitor retrieved successfully",
        "create": "Exhibitor application submitted successfully",
        "update": "Exhibitor application updated successfully",
        "partial_update": "Exhibitor application updated successfully",
    }

    def get_serializer_class(self):
        if self.action == "create":
            return ExhibitorApplySerializer
        if self.action in ["update", "partial_update"]:
            return ExhibitorUpdateSerializer
        if self.action == "review":
            return ExhibitorReviewSerializer
        if self.action == "assign_booth":
            return AssignBoothSerializer
        return ExhibitorSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = Exhibitor.objects.select_related("user", "expo", "assigned_booth")
        if user.is_platform_admin:
            return queryset
        return queryset.filter(
            Q(user=user)
            | Q(expo__in=managed_expos(user))
            | Q(
                application_status=Exhibitor.ApplicationStatus.APPROVED,
                expo__in=visible_expos(user),
            )
        )

    def get_permissions(self):
        if self.action in ["update", "partial_update", "analytics"]:
            permission_classes = [permissions.IsAuthenticated, IsOwnerOrExpoManager]
        elif self.action in ["review", "assign_booth"]:
            permission_classes = [permissions.IsAuthenticated, CanManageExpo]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    @extend_schema(
        summary="Review exhibitor application",
        request=ExhibitorReviewSerializer,
        responses={200: ExhibitorSerializer},
    )
    @action(detail=True, methods=["post"])
    def review(self, request, pk=None):
        exhibitor = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        exhibitor.review(
            request.user,
            serializer.validated_data["status"],
            serializer.validated_data["review_notes"],
        )
        return self.respond(
            ExhibitorSerializer(exhibitor, context=self.get_serializer_context()).data,
            f"Exhibitor application {exhibitor.application_status}",
        )

    @extend_schema(
        summary="Assign booth to exhibitor",
        request=AssignBoothSerializer,
        responses={200: ExhibitorSerializer},
    )
    @action(detail=True, methods=["post"], url_path="assign-booth")
    def assign_booth(self, request, pk=None):
        exhibitor = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booth = Booth.objects.filter(
            pk=serializer.validated_data["booth_id"], expo_id=exhibitor.expo_id
        ).first()
        if booth is None:
            raise NotFoundError("Booth not found in this expo.")
        exhibitor.assign_booth(booth)
        exhibitor.refresh_from_db()
        return self.respond(
            ExhibitorSerializer(exhibitor, context=self.get_serializer_context()).data,
            "Booth assigned successfully",
        )

    @extend_schema(
        summary="My exhibitor applications",
        responses={200: ExhibitorSerializer(many=True)},
    )
    @action(detail=False, methods=["get"])
    def mine(self, request):
        queryset = self.filter_queryset(
            Exhibitor.objects.filter(user=request.user).select_related(
                "expo", "assigned_booth"
            )
        )
        serializer = ExhibitorSerializer(
            queryset, many=True, context=self.get_serializer_context()
        )
        return self.respond(serializer.data, "Applications retrieved successfully")

    @extend_schema(summary="Exhibitor analytics", responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"])
    def analytics(self, request, pk=None):
        exhibitor = self.get_object()
        return self.respond(
            exhibitor.analytics(), "Exhibitor analytics retrieved successfully"
        )


@extend_schema_view(
    list=extend_schema(summary="List attendee registrations"),
    retrieve=extend_schema(summary="Get attendee registration"),
    create=extend_schema(summary="Register for expo"),
    update=extend_schema(summary="Update attendee profile"),
    partial_update=extend_schema(summary="Partially update attendee profile"),
)
class AttendeeViewSet(EnvelopeResponseMixin, viewsets.ModelViewSet):
    """
    ViewSet for expo registrations and check-in.
    """

    http_method_names = ["get", "post", "put", "patch", "head", "options"]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = AttendeeFilter
    ordering_fields = ["registered_at", "check_in_time"]
    ordering = ["-registered_at"]
    envelope_messages = {
        "list": "Attendees retrieved successfully",
        "retrieve": "Attendee retrieved successfully",
        "create": "Successfully registered for expo",
        "update": "Attendee profile updated successfully",
        "partial_update": "Attendee profile updated successfully",
    }

    def get_serializer_class(self):
        if self.action == "create":
            return AttendeeRegisterSerializer
        if self.action in ["update", "partial_update"]:
            return AttendeeUpdateSerializer
        if self.action == "check_in":
            return CheckInSerializer
        if self.action == "bookmark":
            return BookmarkSerializer
        return AttendeeSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = Attendee.objects.select_related("user", "expo")
        if user.is_platform_admin:
            return queryset
        return queryset.filter(Q(user=user) | Q(expo__in=managed_expos(user)))

    def get_permissions(self):
        if self.action in ["update", "partial_update", "bookmarks", "analytics"]:
            permission_classes = [permissions.IsAuthenticated, IsOwnerOrExpoManager]
        elif self.action == "check_in":
            permission_classes = [permissions.IsAuthenticated, CanManageExpo]
        elif self.action == "bookmark":
            permission_classes = [permissions.IsAuthenticated, IsOwner]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    @extend_schema(
        summary="Check in attendee",
        request=CheckInSerializer,
        responses={200: AttendeeSerializer},
    )
    @action(detail=True, methods=["post"], url_path="check-in")
    def check_in(self, request, pk=None):
        attendee = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attendee.check_in(
            method=serializer.validated_data["check_in_method"],
            badge_number=serializer.validated_data["badge_number"],
        )
        return self.respond(
            AttendeeSerializer(attendee, context=self.get_serializer_context()).data,
            "Attendee checked in successfully",
        )

    @extend_schema(
        summary="My expo registrations",
        responses={200: AttendeeSerializer(many=True)},
    )
    @action(detail=False, methods=["get"])
    def mine(self, request):
        queryset = self.filter_queryset(
            Attendee.objects.filter(user=request.user).select_related("expo")
        )
        serializer = AttendeeSerializer(
            queryset, many=True, context=self.get_serializer_context()
        )
        return self.respond(serializer.data, "Registrations retrieved successfully")

    @extend_schema(
        summary="Bookmark exhibitor",
        description="Save an approved exhibitor of the same expo to the attendee's list.",
        request=BookmarkSerializer,
        responses={201: ExhibitorBookmarkSerializer},
    )
    @action(detail=True, methods=["post"])
    def bookmark(self, request, pk=None):
        attendee = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        exhibitor = (
            Exhibitor.objects.approved()
            .filter(pk=serializer.validated_data["exhibitor_id"])
            .first()
        )
        if exhibitor is None:
            raise NotFoundError("Exhibitor not found.")
        bookmark = attendee.bookmark_exhibitor(exhibitor)
        return self.respond(
            ExhibitorBookmarkSerializer(
                bookmark, context=self.get_serializer_context()
            ).data,
            "Exhibitor bookmarked successfully",
            status.HTTP_201_CREATED,
        )

    @extend_schema(
        summary="Bookmarked exhibitors",
        responses={200: ExhibitorBookmarkSerializer(many=True)},
    )
    @action(detail=True, methods=["get"])
    def bookmarks(self, request, pk=None):
        attendee = self.get_object()
        bookmarks = attendee.bookmarks.select_related("exhibitor")
        return self.respond(
            ExhibitorBookmarkSerializer(
                bookmarks, many=True, context=self.get_serializer_context()
            ).data,
            "Bookmarks retrieved successfully",
        )

    @extend_schema(summary="Attendee analytics", responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"])
    def analytics(self, request, pk=None):
        attendee = self.get_object()
        return self.respond(attendee.analytics(), "Attendee analytics retrieved successfully")


@extend_schema_view(
    list=extend_schema(summary="List sessions"),
    retrieve=extend_schema(summary="Get session details"),
    create=extend_schema(summary="Create session"),
    update=extend_schema(summary="Update session"),
    partial_update=extend_schema(summary="Partially update session"),
    destroy=extend_schema(
        summary="Delete session",
        description="Sessions with registered attendees cannot be deleted.",
    ),
)
class ScheduleViewSet(EnvelopeResponseMixin, viewsets.ModelViewSet):
    """
    ViewSet for sessions: registration, attendance, feedback and analytics.
    """

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_class = ScheduleFilter
    search_fields = ["title", "description", "room"]
    ordering_fields = ["date", "start_time", "rating_average"]
    ordering = ["date", "start_time"]
    envelope_messages = {
        "list": "Sessions retrieved successfully",
        "retrieve": "Session retrieved successfully",
        "create": "Session created successfully",
        "update": "Session updated successfully",
        "partial_update": "Session updated successfully",
        "destroy": "Session deleted successfully",
    }

    def get_serializer_class(self):
        if self.action in ["create", "update", "partial_update"]:
            return ScheduleWriteSerializer
        if self.action == "attendance":
            return AttendanceSerializer
        if self.action == "feedback":
            return SessionFeedbackSerializer
        return ScheduleSerializer

    def get_queryset(self):
        return Schedule.objects.filter(
            expo__in=visible_expos(self.request.user)
        ).select_related("expo")

    def get_permissions(self):
        if self.action in [
            "update",
            "partial_update",
            "destroy",
            "attendance",
            "analytics",
            "roster",
        ]:
            permission_classes = [permissions.IsAuthenticated, CanManageExpo]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def perform_create(self, serializer):
        authorize_expo_management(self.request.user, serializer.validated_data["expo"])
        session = serializer.save()
        logger.info(f"Session {session.pk} created on expo {session.expo_id}")

    def respond_session(self, session, message):
        return self.respond(
            ScheduleSerializer(session, context=self.get_serializer_context()).data,
            message,
        )

    @extend_schema(
        summary="Register for session",
        request=None,
        responses={200: SessionRegistrationSerializer},
    )
    @action(detail=True, methods=["post"])
    def register(self, request, pk=None):
        session = self.get_object()
        registration = session.register(request.user)
        return self.respond(
            SessionRegistrationSerializer(
                registration, context=self.get_serializer_context()
            ).data,
            "Successfully registered for session",
        )

    @extend_schema(
        summary="Unregister from session",
        description="Idempotent: unregistering when not registered also succeeds.",
        request=None,
        responses={200: ScheduleSerializer},
    )
    @action(detail=True, methods=["post"])
    def unregister(self, request, pk=None):
        session = self.get_object()
        removed = session.unregister(request.user)
        message = (
            "Successfully unregistered from session"
            if removed
            else "You were not registered for this session"
        )
        return self.respond_session(session, message)

    @extend_schema(
        summary="Mark attendance",
        request=AttendanceSerializer,
        responses={200: ScheduleSerializer},
    )
    @action(detail=True, methods=["post"])
    def attendance(self, request, pk=None):
        session = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session.mark_attendance(
            serializer.validated_data["user_id"], serializer.validated_data["attended"]
        )
        return self.respond_session(session, "Attendance marked successfully")

    @extend_schema(
        summary="Submit session feedback",
        request=SessionFeedbackSerializer,
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=True, methods=["post"])
    def feedback(self, request, pk=None):
        session = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feedback = session.submit_feedback(
            request.user,
            serializer.validated_data["rating"],
            serializer.validated_data.get("comment", ""),
        )
        return self.respond(
            {
                "feedback": SessionFeedbackSerializer(
                    feedback, context=self.get_serializer_context()
                ).data,
                "rating_average": session.rating_average,
                "rating_count": session.rating_count,
            },
            "Feedback submitted successfully",
        )

    @extend_schema(summary="Session analytics", responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"])
    def analytics(self, request, pk=None):
        session = self.get_object()
        return self.respond(session.analytics(), "Session analytics retrieved successfully")

    @extend_schema(
        summary="Session roster",
        responses={200: RosterEntrySerializer(many=True)},
    )
    @action(detail=True, methods=["get"])
    def roster(self, request, pk=None):
        session = self.get_object()
        entries = session.attendees.select_related("attendee__user")
        return self.respond(
            RosterEntrySerializer(
                entries, many=True, context=self.get_serializer_context()
            ).data,
            "Roster retrieved successfully",
        )

    @extend_schema(
        summary="My sessions",
        parameters=[
            OpenApiParameter("expo", OpenApiTypes.UUID, required=True),
            OpenApiParameter("upcoming", OpenApiTypes.BOOL),
            OpenApiParameter("attended", OpenApiTypes.BOOL),
        ],
        responses={200: SessionRegistrationSerializer(many=True)},
    )
    @action(detail=False, methods=["get"])
    def mine(self, request):
        query = MySessionsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        attendee = Attendee.objects.filter(user=request.user, expo_id=params["expo"]).first()
        if attendee is None:
            raise NotFoundError("You are not registered for this expo.")

        registrations = attendee.session_registrations.select_related("session")
        if params.get("upcoming"):
            registrations = registrations.filter(
                session__in=Schedule.objects.upcoming()
            )
        if params.get("attended") is not None:
            registrations = registrations.filter(attended=params["attended"])

        return self.respond(
            SessionRegistrationSerializer(
                registrations, many=True, context=self.get_serializer_context()
            ).data,
            "Sessions retrieved successfully",
        )


@extend_schema_view(
    list=extend_schema(
        summary="List feedback",
        description="Own feedback, feedback on managed expos and feedback assigned to the caller.",
    ),
    retrieve=extend_schema(summary="Get feedback"),
    create=extend_schema(summary="Submit feedback"),
    update=extend_schema(summary="Update feedback"),
    partial_update=extend_schema(summary="Partially update feedback"),
)
class FeedbackViewSet(EnvelopeResponseMixin, viewsets.ModelViewSet):
    """
    ViewSet for expo feedback and its handling workflow.
    """

    http_method_names = ["get", "post", "put", "patch", "head", "options"]
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_class = FeedbackFilter
    search_fields = ["subject", "message"]
    ordering_fields = ["created_at", "priority", "status"]
    ordering = ["-created_at"]
    envelope_messages = {
        "list": "Feedback retrieved successfully",
        "retrieve": "Feedback retrieved successfully",
        "create": "Feedback submitted successfully",
        "update": "Feedback updated successfully",
        "partial_update": "Feedback updated successfully",
    }

    def get_serializer_class(self):
        if self.action == "create":
            return FeedbackCreateSerializer
        if self.action in ["update", "partial_update"]:
            return FeedbackUpdateSerializer
        if self.action == "assign":
            return FeedbackAssignSerializer
        if self.action == "reply":
            return FeedbackRespondSerializer
        if self.action == "resolve":
            return FeedbackResolveSerializer
        if self.action == "escalate":
            return FeedbackEscalateSerializer
        return FeedbackSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = Feedback.objects.select_related(
            "user", "expo", "assigned_to", "resolved_by", "escalated_to"
        )
        if user.is_platform_admin:
            return queryset
        return queryset.filter(
            Q(user=user)
            | Q(expo__in=managed_expos(user))
            | Q(assigned_to=user)
            | Q(escalated_to=user)
        )

    def get_permissions(self):
        if self.action in ["update", "partial_update"]:
            permission_classes = [permissions.IsAuthenticated, IsOwnerOrExpoManager]
        elif self.action in ["assign", "escalate"]:
            permission_classes = [permissions.IsAuthenticated, CanManageExpo]
        elif self.action in ["reply", "resolve"]:
            permission_classes = [permissions.IsAuthenticated, CanHandleFeedback]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def perform_create(self, serializer):
        expo = serializer.validated_data["expo"]
        if not visible_expos(self.request.user).filter(pk=expo.pk).exists():
            raise NotFoundError("Expo not found.")
        feedback = serializer.save()
        logger.info(f"Feedback {feedback.pk} submitted to expo {expo.pk}")

    def respond_feedback(self, feedback, message):
        return self.respond(
            FeedbackSerializer(feedback, context=self.get_serializer_context()).data,
            message,
        )

    @extend_schema(
        summary="Assign feedback",
        request=FeedbackAssignSerializer,
        responses={200: FeedbackSerializer},
    )
    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        feedback = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feedback.assign(serializer.validated_data["assigned_to"])
        return self.respond_feedback(feedback, "Feedback assigned successfully")

    @extend_schema(
        summary="Respond to feedback",
        request=FeedbackRespondSerializer,
        responses={200: FeedbackSerializer},
    )
    @action(detail=True, methods=["post"], url_path="respond", url_name="respond")
    def reply(self, request, pk=None):
        feedback = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feedback.respond(
            request.user,
            serializer.validated_data["message"],
            serializer.validated_data["is_internal"],
        )
        return self.respond_feedback(feedback, "Response added successfully")

    @extend_schema(
        summary="Resolve feedback",
        request=FeedbackResolveSerializer,
        responses={200: FeedbackSerializer},
    )
    @action(detail=True, methods=["post"])
    def resolve(self, request, pk=None):
        feedback = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feedback.resolve(request.user, serializer.validated_data["resolution"])
        return self.respond_feedback(feedback, "Feedback resolved successfully")

    @extend_schema(
        summary="Escalate feedback",
        request=FeedbackEscalateSerializer,
        responses={200: FeedbackSerializer},
    )
    @action(detail=True, methods=["post"])
    def escalate(self, request, pk=None):
        feedback = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feedback.escalate(serializer.validated_data["escalated_to"])
        return self.respond_feedback(feedback, "Feedback escalated successfully")

    @extend_schema(summary="My feedback", responses={200: FeedbackSerializer(many=True)})
    @action(detail=False, methods=["get"])
    def mine(self, request):
        queryset = self.filter_queryset(
            Feedback.objects.filter(user=request.user).select_related("expo", "assigned_to")
        )
        serializer = FeedbackSerializer(
            queryset, many=True, context=self.get_serializer_context()
        )
        return self.respond(serializer.data, "Feedback retrieved successfully")
