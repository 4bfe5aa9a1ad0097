"""
Django admin registrations for the clinic models.

Superusers can inspect and correct data at ``/admin/``.  Invoice and
prescription items are edited inline with their parent.
"""

from django.contrib import admin

from .models import (
    User,
    PatientInfo,
    DoctorSchedule,
    Appointment,
    MedicalRecord,
    MedicalFile,
    Prescription,
    PrescriptionItem,
    Invoice,
    InvoiceItem,
    AuditEvent,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'full_name', 'role', 'specialization', 'is_active', 'is_staff')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'full_name', 'email', 'phone')
    exclude = ('password',)


@admin.register(PatientInfo)
class PatientInfoAdmin(admin.ModelAdmin):
    list_display = ('patient', 'emergency_contact', 'emergency_phone')
    search_fields = ('patient__username', 'patient__full_name')


@admin.register(DoctorSchedule)
class DoctorScheduleAdmin(admin.ModelAdmin):
    list_display = ('doctor', 'day_of_week', 'start_time', 'end_time', 'is_available')
    list_filter = ('day_of_week', 'is_available')
    search_fields = ('doctor__username', 'doctor__full_name')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'date', 'time', 'doctor', 'patient', 'status')
    list_filter = ('status', 'date')
    search_fields = ('id', 'purpose', 'doctor__username', 'patient__username')


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'record_date', 'diagnosis')
    search_fields = ('id', 'patient__username', 'diagnosis')


@admin.register(MedicalFile)
class MedicalFileAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'file_name', 'file_type', 'upload_date')
    list_filter = ('file_type',)
    search_fields = ('file_name', 'patient__username')
    exclude = ('file_data',)


class PrescriptionItemInline(admin.TabularInline):
    model = PrescriptionItem
    extra = 0


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'prescription_date', 'expiry_date')
    search_fields = ('id', 'patient__username', 'doctor__username', 'diagnosis')
    inlines = [PrescriptionItemInline]


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    readonly_fields = ('total_price',)


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'invoice_date', 'due_date', 'total_amount', 'status')
    list_filter = ('status',)
    search_fields = ('id', 'patient__username')
    readonly_fields = ('total_amount',)
    inlines = [InvoiceItemInline]


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('user__username', 'object_id')
