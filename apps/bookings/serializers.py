"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.profiles.serializers import GenreListField

from .application.command_handlers import OfferTerms
from .models import Booking, InstantGig, Offer


def _photo_for(user) -> str:
    if user.is_artist:
        profile = getattr(user, "artist_profile", None)
        return profile.profile_photo_url if profile else ""
    profile = getattr(user, "venue_profile", None)
    return profile.main_photo_url if profile else ""


class OfferTermsSerializer(serializers.Serializer):
    """Input for sending and countering offers."""

    date = serializers.DateField()
    pay_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    set_count = serializers.IntegerField(min_value=1, default=1)
    set_length_min = serializers.IntegerField(min_value=1, default=60)
    other_terms = serializers.CharField(allow_blank=True, required=False, default="")

    def to_terms(self) -> OfferTerms:
        return OfferTerms(**self.validated_data)


class SendOfferSerializer(OfferTermsSerializer):
    conversation_id = serializers.IntegerField()

    def to_terms(self) -> OfferTerms:
        data = dict(self.validated_data)
        data.pop("conversation_id")
        return OfferTerms(**data)


class OfferSerializer(serializers.ModelSerializer):
    from_user_name = serializers.SerializerMethodField()
    recipient_id = serializers.ReadOnlyField()

    class Meta:
        model = Offer
        fields = [
            "id",
            "conversation",
            "from_user",
            "from_user_name",
            "recipient_id",
            "date",
            "pay_amount",
            "set_count",
            "set_length_min",
            "other_terms",
            "status",
            "parent",
            "responded_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_from_user_name(self, obj: Offer) -> str:
        return obj.from_user.display_name


class InstantGigCreateSerializer(serializers.Serializer):
    date = serializers.DateField()
    pay_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    genres = GenreListField(required=False, default=list)
    city = serializers.CharField(max_length=100, allow_blank=True, required=False, default="")
    notes = serializers.CharField(allow_blank=True, required=False, default="")


class InstantGigSerializer(serializers.ModelSerializer):
    creator_name = serializers.SerializerMethodField()
    creator_photo = serializers.SerializerMethodField()

    class Meta:
        model = InstantGig
        fields = [
            "id",
            "created_by",
            "creator_role",
            "creator_name",
            "creator_photo",
            "date",
            "pay_amount",
            "genres",
            "city",
            "notes",
            "status",
            "booked_by",
            "booked_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_creator_name(self, obj: InstantGig) -> str:
        return obj.created_by.display_name

    def get_creator_photo(self, obj: InstantGig) -> str:
        return _photo_for(obj.created_by)


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=True, required=False, default="")


class BookingSerializer(serializers.ModelSerializer):
    """Booking card used by the list and detail endpoints."""

    artist_name = serializers.SerializerMethodField()
    venue_name = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "date",
            "status",
            "source",
            "agreed_pay",
            "artist",
            "artist_name",
            "venue",
            "venue_name",
            "set_count",
            "set_length_min",
            "other_terms",
            "offer",
            "instant_gig",
            "conversation",
            "cancellation_reason",
            "canceled_at",
            "completed_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_artist_name(self, obj: Booking) -> str:
        return obj.artist.display_name

    def get_venue_name(self, obj: Booking) -> str:
        return obj.venue.display_name
