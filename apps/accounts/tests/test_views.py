from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

User = get_user_model()


class BaseAPITestCase(APITestCase):
    """Base test case with common setup for API tests."""

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="testuser",
            email="test@example.com",
            password="testpass123",
            first_name="Test",
            last_name="User",
            role=User.Role.EXHIBITOR,
        )


class TokenViewTests(BaseAPITestCase):
    def test_obtain_token(self):
        """Test valid credentials return an access and refresh token."""
        response = self.client.post(
            reverse("accounts:token-obtain"),
            {"username": "testuser", "password": "testpass123"},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

    def test_obtain_token_with_bad_password(self):
        """Test invalid credentials are rejected."""
        response = self.client.post(
            reverse("accounts:token-obtain"),
            {"username": "testuser", "password": "wrong"},
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data["success"])

    def test_refresh_token(self):
        """Test a refresh token yields a new access token."""
        tokens = self.client.post(
            reverse("accounts:token-obtain"),
            {"username": "testuser", "password": "testpass123"},
        ).data

        response = self.client.post(
            reverse("accounts:token-refresh"), {"refresh": tokens["refresh"]}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)


class MeViewTests(BaseAPITestCase):
    def test_me_with_bearer_token(self):
        """Test the JWT identifies the user and their role."""
        access = self.client.post(
            reverse("accounts:token-obtain"),
            {"username": "testuser", "password": "testpass123"},
        ).data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")

        response = self.client.get(reverse("accounts:me"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["data"]["username"], "testuser")
        self.assertEqual(response.data["data"]["role"], User.Role.EXHIBITOR)
        self.assertEqual(response.data["data"]["full_name"], "Test User")

    def test_me_requires_authentication(self):
        """Test anonymous access is rejected."""
        response = self.client.get(reverse("accounts:me"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"], "AuthenticationError")

    def test_me_with_invalid_token(self):
        """Test a malformed bearer token is rejected."""
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

        response = self.client.get(reverse("accounts:me"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
