"""API tests for authentication endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "email": "artist@example.com",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
            "role": "artist",
            "display_name": "Night Owls",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("access", response.data["tokens"])
        self.assertEqual(response.data["user"]["email"], payload["email"])
        self.assertEqual(response.data["user"]["display_name"], "Night Owls")
        user = User.objects.get(email=payload["email"])
        self.assertTrue(user.is_artist)

    def test_register_rejects_duplicate_email_case_insensitively(self) -> None:
        User.objects.create_user(email="venue@example.com", password="StrongPass123", role=User.Role.VENUE)
        payload = {
            "email": "Venue@Example.com",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
            "role": "venue",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)

    def test_register_requires_matching_passwords_and_role(self) -> None:
        payload = {
            "email": "someone@example.com",
            "password": "StrongPass123",
            "password_confirm": "OtherPass123",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("role", response.data)

    def test_login_limited_attempts(self) -> None:
        user = User.objects.create_user(
            email="lock@example.com",
            password="CorrectPassword1",
            role=User.Role.VENUE,
        )

        url = reverse("auth:login")
        wrong_payload = {"email": user.email, "password": "wrong"}
        for _ in range(5):
            response = self.client.post(url, wrong_payload, format="json")

        user.refresh_from_db()
        self.assertTrue(user.is_locked)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(url, {"email": user.email, "password": "CorrectPassword1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        # After lock expires user can login again
        user.locked_until = timezone.now() - timedelta(minutes=1)
        user.save(update_fields=["locked_until"])
        response = self.client.post(url, {"email": user.email, "password": "CorrectPassword1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        user.refresh_from_db()
        self.assertIsNone(user.locked_until)

    def test_token_refresh(self) -> None:
        User.objects.create_user(email="r@example.com", password="CorrectPassword1", role=User.Role.ARTIST)
        login = self.client.post(
            reverse("auth:login"),
            {"email": "r@example.com", "password": "CorrectPassword1"},
            format="json",
        )
        response = self.client.post(
            reverse("auth:token_refresh"),
            {"refresh": login.data["tokens"]["refresh"]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)


class MeAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="me@example.com", password="StrongPass123", role=User.Role.ARTIST)
        self.client.force_authenticate(self.user)

    def test_patch_updates_names_only(self) -> None:
        response = self.client.patch(
            reverse("user-me"),
            {"first_name": "Ana", "role": "venue", "email": "x@example.com"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, "Ana")
        self.assertEqual(self.user.role, User.Role.ARTIST)
        self.assertEqual(self.user.email, "me@example.com")

    def test_anonymous_is_rejected(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("user-me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
