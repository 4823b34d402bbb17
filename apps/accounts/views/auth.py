import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from apps.accounts.serializers import UserSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    get=extend_schema(
        summary="Current user",
        description="Return the authenticated user with their platform role",
        responses={200: UserSerializer, 401: OpenApiResponse(description="Not authenticated")},
        tags=["Authentication"],
    )
)
class MeView(APIView):
    """
    Get current user information
    """

    permission_classes = [IsAuthenticated]
    throttle_classes = [UserRateThrottle]

    def get(self, request: Request) -> Response:
        """Get current user data"""
        serializer = UserSerializer(request.user, context={"request": request})
        return Response(
            {
                "success": True,
                "message": "User retrieved successfully",
                "data": serializer.data,
            },
            status=status.HTTP_200_OK,
        )
