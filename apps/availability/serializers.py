"""Serializers for open dates, date needs and the calendar."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

from . import scheduling
from .models import DateNeed, OpenDate


class OpenDateSerializer(serializers.ModelSerializer):
    class Meta:
        model = OpenDate
        fields = ["id", "date", "status", "created_at"]
        read_only_fields = ["id", "status", "created_at"]


class DateNeedSerializer(serializers.ModelSerializer):
    class Meta:
        model = DateNeed
        fields = ["id", "date", "status", "notes", "created_at"]
        read_only_fields = ["id", "status", "created_at"]


class RecurrenceSerializer(serializers.Serializer):
    rule = serializers.ChoiceField(choices=scheduling.RECURRENCE_RULES)
    count = serializers.IntegerField(min_value=1)
    start = serializers.DateField(required=False)

    def validate_count(self, value: int) -> int:
        max_count = getattr(settings, "MARKETPLACE_RECURRENCE_MAX_COUNT", 52)
        if value > max_count:
            raise serializers.ValidationError(f"At most {max_count} occurrences.")
        return value


class SyncOpenDatesSerializer(serializers.Serializer):
    dates = serializers.ListField(child=serializers.DateField(), allow_empty=True)
    recurrence = RecurrenceSerializer(required=False, allow_null=True)


class CalendarQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1970, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)
