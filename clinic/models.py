"""
Database models for the MediCare backend.

These models capture the core concepts of the system: doctor and
patient accounts, patient medical information, weekly doctor schedules,
appointments, medical records and uploaded files, prescriptions and
invoices.  Where possible the data model mirrors the fields exposed by
the single-page client to simplify the transformation to JSON
responses.

Primary keys are database-generated auto-increment integers: they start
at 1 and are never reused after a delete.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Custom user model carrying the role and the profile fields.

    Roles mirror the client roles: ``doctor`` and ``patient``.  Doctors
    are effectively administrators of every record.  The role is set at
    creation and never changed through the API.
    """
    ROLE_DOCTOR = 'doctor'
    ROLE_PATIENT = 'patient'
    ROLE_CHOICES = [
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_PATIENT, 'Patient'),
    ]
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]
    BLOOD_GROUPS = ['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-']

    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)
    full_name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    blood_group = models.CharField(max_length=3, choices=[(g, g) for g in BLOOD_GROUPS], blank=True)
    address = models.TextField(blank=True)
    profile_image = models.TextField(blank=True, help_text="data:image/... URL")
    specialization = models.CharField(max_length=255, blank=True)
    languages = models.JSONField(default=list, blank=True)

    @property
    def is_doctor(self) -> bool:
        return self.role == self.ROLE_DOCTOR

    @property
    def is_patient(self) -> bool:
        return self.role == self.ROLE_PATIENT

    @property
    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.username

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class PatientInfo(models.Model):
    """Medical background of a patient, one row per patient user."""
    patient = models.OneToOneField(User, on_delete=models.CASCADE, related_name='patient_info')
    allergies = models.JSONField(default=list, blank=True)
    medical_conditions = models.JSONField(default=list, blank=True)
    current_medications = models.JSONField(default=list, blank=True)
    emergency_contact = models.CharField(max_length=255, blank=True)
    emergency_phone = models.CharField(max_length=32, blank=True)
    height = models.CharField(max_length=32, blank=True)
    weight = models.CharField(max_length=32, blank=True)

    def __str__(self) -> str:
        return f"info for {self.patient_id}"


class DoctorSchedule(models.Model):
    """A recurring weekly availability window for a doctor.

    ``day_of_week`` follows the client convention: 0 is Sunday and 6 is
    Saturday.  Times are ``HH:MM`` strings.
    """
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='schedules')
    day_of_week = models.PositiveSmallIntegerField(validators=[MinValueValidator(0), MaxValueValidator(6)])
    start_time = models.CharField(max_length=5)
    end_time = models.CharField(max_length=5)
    is_available = models.BooleanField(default=True)

    class Meta:
        indexes = [
            models.Index(fields=['doctor', 'day_of_week'], name='clinic_sched_doctor_day_idx'),
        ]

    def __str__(self) -> str:
        return f"Schedule(d={self.doctor_id}, day={self.day_of_week}, {self.start_time}-{self.end_time})"


class Appointment(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='patient_appointments')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='doctor_appointments')
    date = models.DateField()
    time = models.CharField(max_length=5)
    duration = models.PositiveIntegerField(default=30, help_text="In minutes")
    purpose = models.CharField(max_length=255)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    notes = models.TextField(blank=True)

    class Meta:
        indexes = [
            models.Index(fields=['doctor', 'date'], name='clinic_appt_doctor_date_idx'),
            models.Index(fields=['patient', 'date'], name='clinic_appt_patient_date_idx'),
        ]

    def __str__(self) -> str:
        return f"Appointment #{self.id} d={self.doctor_id} p={self.patient_id} {self.date} {self.time}"


class MedicalRecord(models.Model):
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='medical_records')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='medical_records'
    )
    record_date = models.DateTimeField(default=timezone.now)
    diagnosis = models.TextField(blank=True)
    symptoms = models.JSONField(default=list, blank=True)
    treatment = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"Record #{self.id} p={self.patient_id}"


class MedicalFile(models.Model):
    """A file uploaded for a patient, stored inline as base64 text."""
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='medical_files')
    record = models.ForeignKey(
        MedicalRecord, null=True, blank=True, on_delete=models.SET_NULL, related_name='files'
    )
    file_type = models.CharField(max_length=64)
    file_name = models.CharField(max_length=255)
    file_data = models.TextField()
    upload_date = models.DateTimeField(default=timezone.now)
    description = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.file_name} p={self.patient_id}"


class Prescription(models.Model):
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='patient_prescriptions')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='doctor_prescriptions')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='prescriptions'
    )
    prescription_date = models.DateTimeField(default=timezone.now)
    expiry_date = models.DateField(null=True, blank=True)
    diagnosis = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"Prescription #{self.id} d={self.doctor_id} p={self.patient_id}"


class PrescriptionItem(models.Model):
    prescription = models.ForeignKey(Prescription, on_delete=models.CASCADE, related_name='items')
    medication_name = models.CharField(max_length=255)
    dosage = models.CharField(max_length=128)
    frequency = models.CharField(max_length=128)
    duration = models.CharField(max_length=128)
    instructions = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"{self.medication_name} ({self.dosage})"


class Invoice(models.Model):
    """An invoice for a patient.

    ``total_amount`` is stored in paise and must equal the sum of the
    items' ``total_price``.  It is kept in sync by
    :mod:`clinic.services.billing`, never by the client.
    """
    STATUS_UNPAID = 'unpaid'
    STATUS_PAID = 'paid'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_UNPAID, 'Unpaid'),
        (STATUS_PAID, 'Paid'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='invoices')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='invoices'
    )
    invoice_date = models.DateField(default=timezone.localdate)
    due_date = models.DateField(null=True, blank=True)
    total_amount = models.PositiveBigIntegerField(default=0, help_text="In paise")
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_UNPAID, db_index=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"Invoice #{self.id} p={self.patient_id} total={self.total_amount}"


class InvoiceItem(models.Model):
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='items')
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.PositiveBigIntegerField(help_text="In paise")
    total_price = models.PositiveBigIntegerField(help_text="quantity * unit_price, in paise")

    def __str__(self) -> str:
        return f"{self.description} x{self.quantity}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.BigIntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='clinic_audit_action_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='clinic_audit_object_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
