"""Role based permission classes."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsArtist(permissions.BasePermission):
    """Allows access only to authenticated users with the artist role."""

    message = "Only artists can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_artist", False))


class IsVenue(permissions.BasePermission):
    """Allows access only to authenticated users with the venue role."""

    message = "Only venues can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_venue", False))


class HasMarketplaceRole(permissions.BasePermission):
    """Artists and venues, but not role-less staff accounts."""

    message = "A marketplace role (artist or venue) is required."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "role", ""))
