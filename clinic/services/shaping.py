"""
JSON shapes returned by the API.

Models are turned into the camelCase dictionaries the client expects.
Related users are embedded as small summaries rather than full
profiles.  No function in this module ever emits a password.
"""
from __future__ import annotations

from typing import Optional

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


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def user_public(user: User) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'role': user.role,
        'email': user.email,
        'fullName': user.full_name,
        'phone': user.phone,
        'gender': user.gender or None,
        'dateOfBirth': _iso(user.date_of_birth),
        'bloodGroup': user.blood_group or None,
        'address': user.address,
        'profileImage': user.profile_image or None,
        'specialization': user.specialization or None,
        'languages': list(user.languages or []),
        'isActive': user.is_active,
        'createdAt': _iso(user.date_joined),
    }


def patient_summary(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return {'id': user.id, 'fullName': user.full_name, 'profileImage': user.profile_image or None}


def doctor_summary(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return {'id': user.id, 'fullName': user.full_name, 'specialization': user.specialization or None}


def billing_contact(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return {
        'id': user.id,
        'fullName': user.full_name,
        'address': user.address,
        'phone': user.phone,
        'email': user.email,
    }


def patient_info(info: PatientInfo) -> dict:
    return {
        'id': info.id,
        'patientId': info.patient_id,
        'allergies': list(info.allergies or []),
        'medicalConditions': list(info.medical_conditions or []),
        'currentMedications': list(info.current_medications or []),
        'emergencyContact': info.emergency_contact,
        'emergencyPhone': info.emergency_phone,
        'height': info.height,
        'weight': info.weight,
    }


def schedule(entry: DoctorSchedule) -> dict:
    return {
        'id': entry.id,
        'doctorId': entry.doctor_id,
        'dayOfWeek': entry.day_of_week,
        'startTime': entry.start_time,
        'endTime': entry.end_time,
        'isAvailable': entry.is_available,
    }


def appointment(appt: Appointment) -> dict:
    return {
        'id': appt.id,
        'patientId': appt.patient_id,
        'doctorId': appt.doctor_id,
        'date': _iso(appt.date),
        'time': appt.time,
        'duration': appt.duration,
        'purpose': appt.purpose,
        'status': appt.status,
        'notes': appt.notes,
        'patient': patient_summary(appt.patient),
        'doctor': doctor_summary(appt.doctor),
    }


def medical_record(record: MedicalRecord, *, with_patient: bool = False) -> dict:
    data = {
        'id': record.id,
        'patientId': record.patient_id,
        'appointmentId': record.appointment_id,
        'recordDate': _iso(record.record_date),
        'diagnosis': record.diagnosis,
        'symptoms': list(record.symptoms or []),
        'treatment': record.treatment,
        'notes': record.notes,
    }
    if with_patient:
        data['patient'] = patient_summary(record.patient)
    return data


def medical_file(f: MedicalFile, *, with_data: bool = True) -> dict:
    data = {
        'id': f.id,
        'patientId': f.patient_id,
        'recordId': f.record_id,
        'fileType': f.file_type,
        'fileName': f.file_name,
        'uploadDate': _iso(f.upload_date),
        'description': f.description,
    }
    if with_data:
        data['fileData'] = f.file_data
    return data


def prescription_item(item: PrescriptionItem) -> dict:
    return {
        'id': item.id,
        'prescriptionId': item.prescription_id,
        'medicationName': item.medication_name,
        'dosage': item.dosage,
        'frequency': item.frequency,
        'duration': item.duration,
        'instructions': item.instructions,
    }


def prescription(p: Prescription) -> dict:
    return {
        'id': p.id,
        'patientId': p.patient_id,
        'doctorId': p.doctor_id,
        'appointmentId': p.appointment_id,
        'prescriptionDate': _iso(p.prescription_date),
        'expiryDate': _iso(p.expiry_date),
        'diagnosis': p.diagnosis,
        'notes': p.notes,
        'patient': {'id': p.patient.id, 'fullName': p.patient.full_name} if p.patient_id else None,
        'doctor': doctor_summary(p.doctor),
        'items': [prescription_item(i) for i in sorted(p.items.all(), key=lambda i: i.id)],
    }


def invoice_item(item: InvoiceItem) -> dict:
    return {
        'id': item.id,
        'invoiceId': item.invoice_id,
        'description': item.description,
        'quantity': item.quantity,
        'unitPrice': item.unit_price,
        'totalPrice': item.total_price,
    }


def invoice(inv: Invoice) -> dict:
    return {
        'id': inv.id,
        'patientId': inv.patient_id,
        'appointmentId': inv.appointment_id,
        'invoiceDate': _iso(inv.invoice_date),
        'dueDate': _iso(inv.due_date),
        'totalAmount': inv.total_amount,
        'status': inv.status,
        'notes': inv.notes,
        'patientName': inv.patient.full_name or 'Unknown',
        'patient': billing_contact(inv.patient),
        'items': [invoice_item(i) for i in sorted(inv.items.all(), key=lambda i: i.id)],
    }
