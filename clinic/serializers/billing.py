from rest_framework import serializers

from clinic.models import Invoice
from .fields import CleanCharField


class InvoiceItemSerializer(serializers.Serializer):
    """One line; prices are integer paise.  ``totalPrice`` is computed, never read."""

    description = CleanCharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    unitPrice = serializers.IntegerField(source='unit_price', min_value=0)


class InvoiceCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(source='patient_id', min_value=1)
    appointmentId = serializers.IntegerField(source='appointment_id', min_value=1, required=False, allow_null=True)
    invoiceDate = serializers.DateField(source='invoice_date', required=False)
    dueDate = serializers.DateField(source='due_date', required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Invoice.STATUS_CHOICES, required=False)
    notes = CleanCharField(required=False, allow_blank=True)
    totalAmount = serializers.IntegerField(source='total_amount', min_value=0, required=False, allow_null=True)
    items = InvoiceItemSerializer(many=True, required=False)


class InvoiceUpdateSerializer(InvoiceCreateSerializer):
    patientId = None
