"""Serializers for search parameters, search results and matches."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.profiles.serializers import GenreListField
from apps.profiles.models import ArtistProfile, VenueProfile

from .models import Match


class VenueSearchParamsSerializer(serializers.Serializer):
    search_date = serializers.DateField(required=False, allow_null=True)
    artist_price_min = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    artist_price_max = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    artist_genres = GenreListField(required=False)


class ArtistSearchParamsSerializer(serializers.Serializer):
    search_date = serializers.DateField(required=False, allow_null=True)
    budget_min_search = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    budget_max_search = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    genres_search = GenreListField(required=False)

    def validate(self, attrs):  # type: ignore
        low, high = attrs.get("budget_min_search"), attrs.get("budget_max_search")
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError("budget_min_search cannot exceed budget_max_search.")
        return attrs


class VenueSearchResultSerializer(serializers.ModelSerializer):
    venue_id = serializers.ReadOnlyField(source="user_id")
    match_score = serializers.IntegerField(read_only=True)

    class Meta:
        model = VenueProfile
        fields = [
            "venue_id",
            "venue_name",
            "city",
            "state",
            "genres_preferred",
            "budget_min",
            "budget_max",
            "capacity",
            "pa_provided",
            "backline_provided",
            "main_photo_url",
            "match_score",
        ]
        read_only_fields = fields


class ArtistSearchResultSerializer(serializers.ModelSerializer):
    artist_id = serializers.ReadOnlyField(source="user_id")
    match_score = serializers.IntegerField(read_only=True)

    class Meta:
        model = ArtistProfile
        fields = [
            "artist_id",
            "stage_name",
            "home_city",
            "home_state",
            "genres",
            "price_min",
            "act_type",
            "profile_photo_url",
            "no_show_count",
            "match_score",
        ]
        read_only_fields = fields


class MatchSerializer(serializers.ModelSerializer):
    artist_name = serializers.SerializerMethodField()
    venue_name = serializers.SerializerMethodField()

    class Meta:
        model = Match
        fields = ["id", "artist", "artist_name", "venue", "venue_name", "date", "score", "status", "created_at"]
        read_only_fields = fields

    def get_artist_name(self, obj: Match) -> str:
        return obj.artist.display_name

    def get_venue_name(self, obj: Match) -> str:
        return obj.venue.display_name
