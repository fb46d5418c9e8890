"""Serializers for transforming domain models to API responses and back."""

from rest_framework import serializers


class AttendeeSerializer(serializers.Serializer):
    """Serializer for Attendee domain model."""

    name = serializers.CharField()
    email = serializers.EmailField()
    signed_at = serializers.DateTimeField()
    paid_at = serializers.DateTimeField(allow_null=True)


class PaymentSerializer(serializers.Serializer):
    """Serializer for Payment domain model."""

    email = serializers.EmailField()
    amount = serializers.IntegerField()
    receipt_id = serializers.CharField()
    paid_at = serializers.DateTimeField(allow_null=True)


class OccurrenceSerializer(serializers.Serializer):
    """Serializer for Occurrence domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    starts_at = serializers.DateTimeField()
    location = serializers.CharField()
    price = serializers.IntegerField(source="record.price.amount")
    level = serializers.CharField(source="record.required_level.name")
    max_participants = serializers.IntegerField(source="record.capacity.value")
    spots_left = serializers.IntegerField()
    attendees = AttendeeSerializer(source="record.attendees", many=True)


class LedgerSerializer(OccurrenceSerializer):
    """Occurrence including its payments, for staff."""

    payments = PaymentSerializer(source="record.payments", many=True)


class PaymentInputSerializer(serializers.Serializer):
    """Validates a payment notification."""

    email = serializers.EmailField()
    amount = serializers.IntegerField(min_value=0)
    receipt_id = serializers.CharField(max_length=255)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
