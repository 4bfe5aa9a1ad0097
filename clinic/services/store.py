"""
Keyed access to the clinic's records.

``EntityStore`` is a thin wrapper over one model's default manager that
exposes the five operations every route needs: ``get``, ``list``,
``create``, ``update`` and ``delete``.  Unknown ids are reported as
``None``/``False`` instead of raising, leaving the HTTP mapping to the
views.  Identifiers are assigned by the database, so they are monotonic
and never reused after a delete.
"""
from __future__ import annotations

import logging
from typing import Any, Generic, Optional, Type, TypeVar

from django.db import models, transaction

from clinic.models import (
    Appointment,
    DoctorSchedule,
    Invoice,
    InvoiceItem,
    MedicalFile,
    MedicalRecord,
    PatientInfo,
    Prescription,
    PrescriptionItem,
    User,
)

logger = logging.getLogger(__name__)

M = TypeVar('M', bound=models.Model)


class EntityStore(Generic[M]):
    def __init__(self, model: Type[M], *, select_related: tuple[str, ...] = (), prefetch_related: tuple[str, ...] = ()):
        self.model = model
        self.select_related = select_related
        self.prefetch_related = prefetch_related

    def queryset(self) -> models.QuerySet:
        qs = self.model._default_manager.all()
        if self.select_related:
            qs = qs.select_related(*self.select_related)
        if self.prefetch_related:
            qs = qs.prefetch_related(*self.prefetch_related)
        return qs

    def get(self, pk) -> Optional[M]:
        try:
            return self.queryset().get(pk=pk)
        except (self.model.DoesNotExist, ValueError, TypeError):
            return None

    def list(self, **filters: Any) -> list[M]:
        return list(self.queryset().filter(**filters).order_by('id'))

    def exists(self, **filters: Any) -> bool:
        return self.model._default_manager.filter(**filters).exists()

    def create(self, **data: Any) -> M:
        obj = self.model._default_manager.create(**data)
        logger.debug("created %s #%s", self.model.__name__, obj.pk)
        return obj

    def update(self, pk, **partial: Any) -> Optional[M]:
        """Apply ``partial`` to the record and save only those columns."""
        with transaction.atomic():
            obj = self.get(pk)
            if obj is None:
                return None
            for field, value in partial.items():
                setattr(obj, field, value)
            if partial:
                obj.save(update_fields=list(partial.keys()))
        return obj

    def delete(self, pk) -> bool:
        deleted, _ = self.model._default_manager.filter(pk=pk).delete()
        return bool(deleted)


users: EntityStore[User] = EntityStore(User)
patient_infos: EntityStore[PatientInfo] = EntityStore(PatientInfo)
schedules: EntityStore[DoctorSchedule] = EntityStore(DoctorSchedule)
appointments: EntityStore[Appointment] = EntityStore(Appointment, select_related=('patient', 'doctor'))
medical_records: EntityStore[MedicalRecord] = EntityStore(MedicalRecord, select_related=('patient',))
medical_files: EntityStore[MedicalFile] = EntityStore(MedicalFile)
prescriptions: EntityStore[Prescription] = EntityStore(
    Prescription, select_related=('patient', 'doctor'), prefetch_related=('items',)
)
prescription_items: EntityStore[PrescriptionItem] = EntityStore(PrescriptionItem)
invoices: EntityStore[Invoice] = EntityStore(
    Invoice, select_related=('patient',), prefetch_related=('items',)
)
invoice_items: EntityStore[InvoiceItem] = EntityStore(InvoiceItem)
