"""
Invoice totals.

All amounts are integer paise.  An invoice's ``total_amount`` is derived
data: it always equals the sum of its items' ``total_price`` and every
write path that touches items recomputes it inside the same
transaction, with the invoice row locked so that concurrent appends
cannot lose an update.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from clinic.models import Invoice, InvoiceItem
from clinic.services import store

logger = logging.getLogger(__name__)


def line_total(quantity: int, unit_price: int) -> int:
    return int(quantity) * int(unit_price)


def invoice_total(items: Iterable[Any]) -> int:
    """Sum of ``quantity * unit_price`` over items (models or dicts)."""
    total = 0
    for item in items:
        if isinstance(item, dict):
            total += line_total(item.get('quantity', 1), item['unit_price'])
        else:
            total += line_total(item.quantity, item.unit_price)
    return total


def _build_items(invoice: Invoice, items: list[dict]) -> list[InvoiceItem]:
    return InvoiceItem.objects.bulk_create([
        InvoiceItem(
            invoice=invoice,
            description=item['description'],
            quantity=item.get('quantity', 1),
            unit_price=item['unit_price'],
            total_price=line_total(item.get('quantity', 1), item['unit_price']),
        )
        for item in items
    ])


def _recompute(invoice: Invoice) -> int:
    total = invoice_total(InvoiceItem.objects.filter(invoice=invoice))
    if total != invoice.total_amount:
        invoice.total_amount = total
        invoice.save(update_fields=['total_amount'])
    return total


def create_invoice(data: dict[str, Any]) -> Invoice:
    """Create an invoice and its inline items in one transaction.

    A client-supplied ``total_amount`` is only accepted when it matches
    the computed sum.
    """
    items = data.get('items') or []
    patient = store.users.get(data['patient_id'])
    if patient is None:
        raise NotFound('Patient not found')
    appointment = None
    if data.get('appointment_id'):
        appointment = store.appointments.get(data['appointment_id'])
        if appointment is None:
            raise NotFound('Appointment not found')

    computed = invoice_total(items)
    claimed = data.get('total_amount')
    if claimed is not None and claimed != computed:
        raise ValidationError({'totalAmount': [f"Does not match the sum of the items ({computed})"]})

    header = {k: data[k] for k in ('invoice_date', 'due_date', 'status', 'notes') if data.get(k) is not None}
    with transaction.atomic():
        invoice = Invoice.objects.create(patient=patient, appointment=appointment, total_amount=computed, **header)
        _build_items(invoice, items)
    logger.info("invoice #%s created for patient %s: %s items, total %s", invoice.id, patient.id, len(items), computed)
    return invoice


def add_item(invoice_id: int, item: dict[str, Any]) -> Optional[InvoiceItem]:
    """Append one item and bring the invoice total up to date.

    Returns ``None`` if the invoice does not exist.
    """
    with transaction.atomic():
        invoice = Invoice.objects.select_for_update().filter(pk=invoice_id).first()
        if invoice is None:
            return None
        created = InvoiceItem.objects.create(
            invoice=invoice,
            description=item['description'],
            quantity=item.get('quantity', 1),
            unit_price=item['unit_price'],
            total_price=line_total(item.get('quantity', 1), item['unit_price']),
        )
        total = _recompute(invoice)
    logger.info("invoice #%s item #%s added, total now %s", invoice_id, created.id, total)
    return created


def update_invoice(invoice: Invoice, changes: dict[str, Any]) -> Invoice:
    """Update header fields; when ``items`` is given, replace all items."""
    items = changes.pop('items', None)
    changes.pop('total_amount', None)
    if 'appointment_id' in changes:
        appointment_id = changes.pop('appointment_id')
        if appointment_id and store.appointments.get(appointment_id) is None:
            raise NotFound('Appointment not found')
        changes['appointment_id'] = appointment_id or None

    with transaction.atomic():
        locked = Invoice.objects.select_for_update().get(pk=invoice.pk)
        for field, value in changes.items():
            setattr(locked, field, value)
        if changes:
            locked.save(update_fields=list(changes.keys()))
        if items is not None:
            InvoiceItem.objects.filter(invoice=locked).delete()
            _build_items(locked, items)
            _recompute(locked)
    return store.invoices.get(invoice.pk)