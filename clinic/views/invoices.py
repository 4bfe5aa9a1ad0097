"""
Invoice views.

Doctors create and edit invoices and can list all of them; a patient
can read and download their own.  Amounts are integer paise and the
invoice total is always recomputed on the server
(:mod:`clinic.services.billing`).
"""
from __future__ import annotations

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import IsDoctorRole, check_object_permission, ensure_doctor
from clinic.serializers.billing import InvoiceCreateSerializer, InvoiceItemSerializer, InvoiceUpdateSerializer
from clinic.services import billing, notify, shaping, store
from clinic.services.audit import log_action
from clinic.services.invoice_document import filename_for, render_invoice

from .common import fetch


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def invoices_list(request):
    if request.method == 'GET':
        return Response({'invoices': [shaping.invoice(i) for i in store.invoices.list()]})

    s = InvoiceCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    invoice = billing.create_invoice(dict(s.validated_data))
    log_action(user=request.user, action='invoice_create', object_type='invoice', object_id=invoice.id,
               detail={'totalAmount': invoice.total_amount})
    notify.entity_changed('invoice', invoice.id, 'created', owner_id=invoice.patient_id)
    return Response({'invoice': shaping.invoice(store.invoices.get(invoice.id))}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def invoice_detail(request, pk: int):
    invoice = fetch(store.invoices, pk, 'Invoice not found')
    if request.method == 'GET':
        check_object_permission(request, invoice)
        return Response({'invoice': shaping.invoice(invoice)})

    ensure_doctor(request.user)
    s = InvoiceUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    updated = billing.update_invoice(invoice, dict(s.validated_data))
    log_action(user=request.user, action='invoice_update', object_type='invoice', object_id=invoice.id,
               detail={'status': updated.status, 'totalAmount': updated.total_amount})
    notify.entity_changed('invoice', invoice.id, 'updated', owner_id=invoice.patient_id)
    return Response({'invoice': shaping.invoice(updated)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def invoice_items(request, pk: int):
    s = InvoiceItemSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    item = billing.add_item(pk, s.validated_data)
    if item is None:
        raise NotFound('Invoice not found')
    notify.entity_changed('invoice', pk, 'updated', owner_id=item.invoice.patient_id)
    return Response({'item': shaping.invoice_item(item)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def invoice_download(request, pk: int):
    invoice = fetch(store.invoices, pk, 'Invoice not found')
    check_object_permission(request, invoice)
    resp = HttpResponse(render_invoice(invoice), content_type='text/html; charset=utf-8')
    resp['Content-Disposition'] = f'attachment; filename="{filename_for(invoice)}"'
    return resp
