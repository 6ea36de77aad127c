"""Serializers for the profiles domain."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from . import services
from .models import ArtistProfile, VenueProfile


class GenreListField(serializers.ListField):
    """Accepts a list or a comma separated string and normalises it."""

    child = serializers.CharField(allow_blank=True, max_length=60)

    def to_internal_value(self, data):  # type: ignore
        if isinstance(data, str):
            data = data.split(",")
        return services.normalize_genres(super().to_internal_value(data))


class ArtistProfileSerializer(serializers.ModelSerializer):
    genres = GenreListField(required=False)

    class Meta:
        model = ArtistProfile
        fields = [
            "user",
            "stage_name",
            "home_city",
            "home_state",
            "service_radius_km",
            "price_min",
            "genres",
            "act_type",
            "bio",
            "profile_photo_url",
            "social_links",
            "latitude",
            "longitude",
            "no_show_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["user", "no_show_count", "created_at", "updated_at"]

    def validate_social_links(self, value: Any) -> dict:
        if not isinstance(value, dict):
            raise serializers.ValidationError("Expected an object of platform -> URL.")
        return value


class VenueProfileSerializer(serializers.ModelSerializer):
    genres_preferred = GenreListField(required=False)

    class Meta:
        model = VenueProfile
        fields = [
            "user",
            "venue_name",
            "address1",
            "city",
            "state",
            "postal",
            "genres_preferred",
            "budget_min",
            "budget_max",
            "capacity",
            "pa_provided",
            "backline_provided",
            "bio",
            "main_photo_url",
            "social_links",
            "latitude",
            "longitude",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["user", "created_at", "updated_at"]

    def validate_social_links(self, value: Any) -> dict:
        if not isinstance(value, dict):
            raise serializers.ValidationError("Expected an object of platform -> URL.")
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        instance = self.instance
        budget_min = attrs.get("budget_min", getattr(instance, "budget_min", None))
        budget_max = attrs.get("budget_max", getattr(instance, "budget_max", None))
        if budget_min is not None and budget_max is not None and budget_min > budget_max:
            raise serializers.ValidationError({"budget_max": "Maximum budget must not be below the minimum."})
        return attrs


class GigHistorySerializer(serializers.Serializer):
    booking_id = serializers.IntegerField(source="id")
    date = serializers.DateField()
    venue_id = serializers.IntegerField()
    venue_name = serializers.SerializerMethodField()

    def get_venue_name(self, obj) -> str:
        return obj.venue.display_name


class PublicArtistProfileSerializer(ArtistProfileSerializer):
    """Public artist page: profile plus the completed gig history."""

    gig_history = serializers.SerializerMethodField()

    class Meta(ArtistProfileSerializer.Meta):
        fields = [
            field
            for field in ArtistProfileSerializer.Meta.fields
            if field not in {"latitude", "longitude", "updated_at"}
        ] + ["gig_history"]

    def get_gig_history(self, obj: ArtistProfile) -> list[dict]:
        bookings = services.artist_gig_history(obj.user)
        return GigHistorySerializer(bookings, many=True).data


class UpcomingNeedSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    date = serializers.DateField()
    notes = serializers.CharField()


class PublicVenueProfileSerializer(VenueProfileSerializer):
    """Public venue page: profile plus upcoming open date needs."""

    upcoming_needs = serializers.SerializerMethodField()

    class Meta(VenueProfileSerializer.Meta):
        fields = [
            field
            for field in VenueProfileSerializer.Meta.fields
            if field not in {"latitude", "longitude", "updated_at"}
        ] + ["upcoming_needs"]

    def get_upcoming_needs(self, obj: VenueProfile) -> list[dict]:
        needs = services.venue_upcoming_needs(obj.user)
        return UpcomingNeedSerializer(needs, many=True).data


def serializer_class_for(user):
    return ArtistProfileSerializer if user.is_artist else VenueProfileSerializer
