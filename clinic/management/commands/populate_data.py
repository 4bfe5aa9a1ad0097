"""
Management command to populate the database with demo data.
"""
from datetime import timedelta

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from clinic.models import (
    User, PatientInfo, DoctorSchedule, Appointment, MedicalRecord,
    Prescription, PrescriptionItem, Invoice,
)
from clinic.services import billing


class Command(BaseCommand):
    help = 'Populate database with demo doctors, patients, appointments and invoices'

    def add_arguments(self, parser):
        parser.add_argument('--password', default='password', help='Password for every demo account')

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Creating demo data...')
        password = make_password(options['password'])

        doctors = self.create_doctors(password)
        patients = self.create_patients(password)
        self.create_patient_info(patients)
        self.create_schedules(doctors)
        appointments = self.create_appointments(doctors, patients)
        self.create_records(appointments)
        self.create_prescriptions(appointments)
        self.create_invoices(appointments)

        self.stdout.write(self.style.SUCCESS('Demo data ready.'))

    def create_doctors(self, password):
        doctor_data = [
            {'username': 'dr.avimanyu', 'full_name': 'Dr. Avimanyu Dutta', 'email': 'dr.avimanyu@medicare.com',
             'phone': '+91 555-123-4567', 'gender': 'male', 'specialization': 'Cardiologist',
             'languages': ['English', 'Hindi', 'Assamese']},
            {'username': 'dr.sanjana', 'full_name': 'Dr. Sanjana Das', 'email': 'dr.sanjana@medicare.com',
             'phone': '+91 555-234-5678', 'gender': 'female', 'specialization': 'Neurologist',
             'languages': ['English', 'Hindi', 'Assamese', 'Bengali']},
            {'username': 'dr.sumit', 'full_name': 'Dr. Sumit Kumar', 'email': 'dr.sumit@medicare.com',
             'phone': '+91 555-345-6789', 'gender': 'male', 'specialization': 'Pediatrician',
             'languages': ['English', 'Hindi']},
        ]
        doctors = []
        for data in doctor_data:
            user, created = User.objects.get_or_create(
                username=data['username'],
                defaults={**data, 'role': User.ROLE_DOCTOR, 'password': password},
            )
            doctors.append(user)
            self.stdout.write(f'doctor: {user.username}{"" if created else " (exists)"}')
        return doctors

    def create_patients(self, password):
        patient_data = [
            {'username': 'patient1', 'full_name': 'Avimanyu Dutta', 'email': 'avimanyu.dutta@example.com',
             'phone': '+91 555-987-6543', 'gender': 'male', 'date_of_birth': '1980-05-15',
             'blood_group': 'O+', 'address': '123 GS Road, Guwahati'},
            {'username': 'patient2', 'full_name': 'Abhinandita Kumar', 'email': 'abhinandita.kumar@example.com',
             'phone': '+91 555-876-5432', 'gender': 'female', 'date_of_birth': '1992-11-23',
             'blood_group': 'A-', 'address': '456 Zoo Road, Guwahati'},
            {'username': 'patient3', 'full_name': 'Debojyoti Deb', 'email': 'debojyoti.deb@example.com',
             'phone': '+91 555-765-4321', 'gender': 'male', 'date_of_birth': '1975-08-07',
             'blood_group': 'B+', 'address': '789 Maligaon, Guwahati'},
        ]
        patients = []
        for data in patient_data:
            user, created = User.objects.get_or_create(
                username=data['username'],
                defaults={**data, 'role': User.ROLE_PATIENT, 'password': password},
            )
            patients.append(user)
            self.stdout.write(f'patient: {user.username}{"" if created else " (exists)"}')
        return patients

    def create_patient_info(self, patients):
        info = [
            {'allergies': ['Penicillin', 'Peanuts'], 'medical_conditions': ['Hypertension', 'Type 2 Diabetes'],
             'current_medications': ['Metformin 500mg', 'Lisinopril 10mg'],
             'emergency_contact': 'Rina Dutta (Wife)', 'emergency_phone': '+91 555-987-1234',
             'height': '178 cm', 'weight': '84 kg'},
            {'allergies': ['Sulfa drugs'], 'medical_conditions': ['Asthma'],
             'current_medications': ['Albuterol Inhaler'],
             'emergency_contact': 'Rahul Kumar (Brother)', 'emergency_phone': '+91 555-876-1098',
             'height': '168 cm', 'weight': '61 kg'},
            {'allergies': [], 'medical_conditions': ['Migraine'],
             'current_medications': ['Sumatriptan 50mg'],
             'emergency_contact': 'Mitali Deb (Wife)', 'emergency_phone': '+91 555-765-9876',
             'height': '172 cm', 'weight': '79 kg'},
        ]
        for patient, data in zip(patients, info):
            PatientInfo.objects.get_or_create(patient=patient, defaults=data)

    def create_schedules(self, doctors):
        # day_of_week: 0 = Sunday
        weekly = [
            [(1, '09:00', '17:00'), (3, '09:00', '17:00'), (5, '09:00', '13:00')],
            [(2, '10:00', '18:00'), (4, '10:00', '18:00'), (6, '10:00', '15:00')],
            [(1, '08:00', '16:00'), (2, '08:00', '16:00'), (4, '08:00', '16:00'), (5, '08:00', '16:00')],
        ]
        for doctor, entries in zip(doctors, weekly):
            for day, start, end in entries:
                DoctorSchedule.objects.get_or_create(
                    doctor=doctor, day_of_week=day, start_time=start,
                    defaults={'end_time': end, 'is_available': True},
                )

    def create_appointments(self, doctors, patients):
        today = timezone.localdate()
        plan = [
            (patients[0], doctors[0], -14, '10:00', 'Annual cardiac checkup', Appointment.STATUS_COMPLETED),
            (patients[1], doctors[2], -7, '11:30', 'Asthma follow-up', Appointment.STATUS_COMPLETED),
            (patients[2], doctors[1], -3, '14:00', 'Headache evaluation', Appointment.STATUS_CANCELLED),
            (patients[0], doctors[0], 2, '09:30', 'Follow-up on cardiac medication', Appointment.STATUS_PENDING),
            (patients[2], doctors[1], 4, '15:00', 'Persistent headaches', Appointment.STATUS_PENDING),
            (patients[1], doctors[2], 6, '08:30', 'Annual checkup', Appointment.STATUS_PENDING),
        ]
        appointments = []
        for patient, doctor, offset, time, purpose, status in plan:
            appt, _ = Appointment.objects.get_or_create(
                patient=patient, doctor=doctor, date=today + timedelta(days=offset), time=time,
                defaults={'purpose': purpose, 'status': status, 'duration': 30},
            )
            appointments.append(appt)
        self.stdout.write(f'appointments: {len(appointments)}')
        return appointments

    def create_records(self, appointments):
        for appt in appointments:
            if appt.status != Appointment.STATUS_COMPLETED:
                continue
            MedicalRecord.objects.get_or_create(
                patient=appt.patient, appointment=appt,
                defaults={'diagnosis': appt.purpose, 'symptoms': ['Fatigue'], 'treatment': 'Continue medication'},
            )

    def create_prescriptions(self, appointments):
        completed = [a for a in appointments if a.status == Appointment.STATUS_COMPLETED]
        for appt in completed:
            prescription, created = Prescription.objects.get_or_create(
                patient=appt.patient, doctor=appt.doctor, appointment=appt,
                defaults={'diagnosis': appt.purpose, 'expiry_date': appt.date + timedelta(days=30)},
            )
            if created:
                PrescriptionItem.objects.create(
                    prescription=prescription, medication_name='Paracetamol', dosage='500mg',
                    frequency='Twice daily', duration='5 days', instructions='After meals',
                )

    def create_invoices(self, appointments):
        # unit prices in paise
        lines = {
            'Cardiologist': [('Cardiac Consultation', 1, 10000), ('ECG', 1, 5000)],
            'Neurologist': [('Neurological Consultation', 1, 12500), ('MRI Brain Scan', 1, 7500)],
            'Pediatrician': [('Pediatric Follow-up', 1, 7500)],
        }
        for appt in appointments:
            if appt.status != Appointment.STATUS_COMPLETED or Invoice.objects.filter(appointment=appt).exists():
                continue
            items = [
                {'description': d, 'quantity': q, 'unit_price': p}
                for d, q, p in lines.get(appt.doctor.specialization, [])
            ]
            invoice = billing.create_invoice({
                'patient_id': appt.patient_id, 'appointment_id': appt.id,
                'invoice_date': appt.date, 'due_date': appt.date + timedelta(days=15),
                'items': items,
            })
            self.stdout.write(f'invoice #{invoice.id}: {invoice.total_amount} paise')
