"""
Printable HTML invoice.

The document is rendered from ``clinic/invoice.html`` and offered as a
download; it is HTML, not PDF.  Amounts are stored in paise and shown as
rupees with two decimals.
"""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.template.loader import render_to_string

from clinic.models import Invoice


def format_amount(paise: int) -> str:
    rupees = (Decimal(int(paise)) / 100).quantize(Decimal('0.01'))
    return f"{settings.CURRENCY_SYMBOL}{rupees:,}"


def filename_for(invoice: Invoice) -> str:
    return f"invoice-{invoice.id}.html"


def render_invoice(invoice: Invoice) -> str:
    items = [
        {
            'description': item.description,
            'quantity': item.quantity,
            'unit_price': format_amount(item.unit_price),
            'total_price': format_amount(item.total_price),
        }
        for item in invoice.items.all().order_by('id')
    ]
    context = {
        'invoice': invoice,
        'patient': invoice.patient,
        'items': items,
        'subtotal': format_amount(invoice.total_amount),
        'total': format_amount(invoice.total_amount),
        'hospital_name': settings.HOSPITAL_NAME,
        'hospital_tagline': settings.HOSPITAL_TAGLINE,
    }
    return render_to_string('clinic/invoice.html', context)
