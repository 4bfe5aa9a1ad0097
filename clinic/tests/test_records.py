import base64

import pytest
from django.urls import reverse

from clinic.models import Appointment, MedicalFile, MedicalRecord, Prescription

pytestmark = pytest.mark.django_db

PDF = 'data:application/pdf;base64,' + base64.b64encode(b'%PDF-1.4 ecg').decode()


@pytest.fixture
def record(patient):
    return MedicalRecord.objects.create(patient=patient, diagnosis='Mild arrhythmia', symptoms=['Palpitations'])


class TestMedicalRecords:
    def test_doctor_creates_record(self, doctor_client, patient):
        r = doctor_client.post(reverse('records_list'), {
            'patientId': patient.id, 'diagnosis': 'Hypertension', 'symptoms': ['Headache', 'Dizziness'],
            'treatment': 'Lisinopril 10mg',
        })
        assert r.status_code == 201
        assert r.data['record']['symptoms'] == ['Headache', 'Dizziness']

    def test_patient_cannot_create_record(self, patient_client, patient):
        r = patient_client.post(reverse('records_list'), {'patientId': patient.id, 'diagnosis': 'Self diagnosed'})
        assert r.status_code == 403
        assert not MedicalRecord.objects.exists()

    def test_record_appointment_must_belong_to_patient(self, doctor_client, doctor, patient, other_patient):
        appt = Appointment.objects.create(patient=other_patient, doctor=doctor, date='2025-03-03',
                                          time='10:00', purpose='Checkup')
        r = doctor_client.post(reverse('records_list'), {'patientId': patient.id, 'appointmentId': appt.id})
        assert r.status_code == 404

    def test_unfiltered_listing_is_for_doctors(self, patient_client, doctor_client, record):
        assert patient_client.get(reverse('records_list')).status_code == 403
        r = doctor_client.get(reverse('records_list'))
        assert [rec['id'] for rec in r.data['records']] == [record.id]
        assert r.data['records'][0]['patient']['fullName'] == 'Avimanyu Dutta'

    def test_owner_reads_record_others_do_not(self, patient_client, other_patient_client, record):
        url = reverse('record_detail', args=[record.id])
        assert patient_client.get(url).status_code == 200
        assert other_patient_client.get(url).status_code == 403

    def test_only_doctors_update_records(self, patient_client, doctor_client, record):
        url = reverse('record_detail', args=[record.id])
        assert patient_client.patch(url, {'diagnosis': 'Nothing'}).status_code == 403
        r = doctor_client.patch(url, {'treatment': 'Beta blockers'})
        assert r.status_code == 200
        assert r.data['record']['treatment'] == 'Beta blockers'
        assert r.data['record']['diagnosis'] == 'Mild arrhythmia'

    def test_patient_records_route(self, patient_client, other_patient_client, patient, record):
        r = patient_client.get(reverse('patient_records', args=[patient.id]))
        assert len(r.data['records']) == 1
        assert other_patient_client.get(reverse('patient_records', args=[patient.id])).status_code == 403


class TestMedicalFiles:
    def test_patient_uploads_own_file(self, patient_client, patient, record):
        r = patient_client.post(reverse('files_upload'), {
            'patientId': patient.id, 'recordId': record.id, 'fileType': 'application/pdf',
            'fileName': 'ecg.pdf', 'fileData': PDF, 'description': 'ECG results showing mild irregularities',
        })
        assert r.status_code == 201
        assert r.data['file']['fileData'] == PDF
        listing = patient_client.get(reverse('patient_files', args=[patient.id]))
        assert [f['fileName'] for f in listing.data['files']] == ['ecg.pdf']

    def test_upload_for_another_patient_is_403(self, other_patient_client, patient):
        r = other_patient_client.post(reverse('files_upload'), {
            'patientId': patient.id, 'fileType': 'application/pdf', 'fileName': 'x.pdf', 'fileData': PDF})
        assert r.status_code == 403
        assert not MedicalFile.objects.exists()

    def test_file_data_must_be_base64(self, patient_client, patient):
        r = patient_client.post(reverse('files_upload'), {
            'patientId': patient.id, 'fileType': 'text/plain', 'fileName': 'x.txt', 'fileData': 'not base64!'})
        assert r.status_code == 400
        assert 'fileData' in r.data['error']['fields']

    def test_record_of_another_patient_is_rejected(self, doctor_client, other_patient, record):
        r = doctor_client.post(reverse('files_upload'), {
            'patientId': other_patient.id, 'recordId': record.id, 'fileType': 'application/pdf',
            'fileName': 'x.pdf', 'fileData': PDF})
        assert r.status_code == 400

    def test_delete_file(self, patient_client, other_patient_client, patient):
        f = MedicalFile.objects.create(patient=patient, file_type='image/png', file_name='xray.png', file_data='AAAA')
        url = reverse('file_detail', args=[f.id])
        assert other_patient_client.delete(url).status_code == 403
        r = patient_client.delete(url)
        assert r.status_code == 200
        assert r.data == {'success': True}
        assert not MedicalFile.objects.filter(pk=f.id).exists()


class TestPrescriptions:
    def _create(self, client, patient, **extra):
        payload = {
            'patientId': patient.id, 'diagnosis': 'Asthma',
            'items': [{'medicationName': 'Albuterol Inhaler', 'dosage': '90mcg', 'frequency': 'As needed',
                       'duration': '30 days'}],
        }
        payload.update(extra)
        return client.post(reverse('prescriptions_list'), payload)

    def test_doctor_issues_prescription_with_items(self, doctor_client, doctor, patient):
        r = self._create(doctor_client, patient)
        assert r.status_code == 201
        body = r.data['prescription']
        assert body['doctorId'] == doctor.id
        assert body['patient'] == {'id': patient.id, 'fullName': 'Avimanyu Dutta'}
        assert [i['medicationName'] for i in body['items']] == ['Albuterol Inhaler']

    def test_patient_cannot_issue_prescription(self, patient_client, patient):
        assert self._create(patient_client, patient).status_code == 403
        assert not Prescription.objects.exists()

    def test_listing_by_role(self, doctor_client, other_doctor_client, patient_client, other_patient_client, patient):
        self._create(doctor_client, patient)
        assert len(doctor_client.get(reverse('prescriptions_list')).data['prescriptions']) == 1
        assert other_doctor_client.get(reverse('prescriptions_list')).data['prescriptions'] == []
        assert len(patient_client.get(reverse('prescriptions_list')).data['prescriptions']) == 1
        assert other_patient_client.get(reverse('prescriptions_list')).data['prescriptions'] == []

    def test_only_issuing_doctor_adds_items(self, doctor_client, other_doctor_client, patient):
        pk = self._create(doctor_client, patient).data['prescription']['id']
        item = {'medicationName': 'Prednisone', 'dosage': '10mg', 'frequency': 'Daily', 'duration': '5 days'}
        url = reverse('prescription_items', args=[pk])
        assert other_doctor_client.post(url, item).status_code == 403
        r = doctor_client.post(url, item)
        assert r.status_code == 201
        detail = doctor_client.get(reverse('prescription_detail', args=[pk]))
        assert [i['medicationName'] for i in detail.data['prescription']['items']] == ['Albuterol Inhaler', 'Prednisone']

    def test_other_patient_cannot_read(self, doctor_client, other_patient_client, patient):
        pk = self._create(doctor_client, patient).data['prescription']['id']
        assert other_patient_client.get(reverse('prescription_detail', args=[pk])).status_code == 403


class TestPatientInfo:
    def test_create_read_update(self, patient_client, patient):
        url = reverse('patient_info', args=[patient.id])
        assert patient_client.get(url).status_code == 404
        r = patient_client.post(url, {'allergies': ['Penicillin', 'Peanuts'], 'height': '178 cm'})
        assert r.status_code == 201
        assert patient_client.post(url, {'allergies': []}).status_code == 400
        r = patient_client.patch(url, {'weight': '84 kg'})
        assert r.status_code == 200
        assert r.data['patientInfo']['allergies'] == ['Penicillin', 'Peanuts']
        assert r.data['patientInfo']['weight'] == '84 kg'


class TestSchedules:
    def test_doctor_manages_own_schedule(self, doctor_client, patient_client, doctor):
        url = reverse('doctor_schedule', args=[doctor.id])
        r = doctor_client.post(url, {'dayOfWeek': 1, 'startTime': '09:00', 'endTime': '17:00'})
        assert r.status_code == 201
        entry_id = r.data['schedule']['id']
        listing = patient_client.get(url)
        assert [e['id'] for e in listing.data['schedule']] == [entry_id]

        detail = reverse('schedule_detail', args=[entry_id])
        r = doctor_client.patch(detail, {'endTime': '13:00'})
        assert r.status_code == 200
        assert r.data['schedule']['endTime'] == '13:00'
        assert doctor_client.delete(detail).data == {'success': True}

    def test_end_must_follow_start(self, doctor_client, doctor):
        r = doctor_client.post(reverse('doctor_schedule', args=[doctor.id]),
                               {'dayOfWeek': 1, 'startTime': '17:00', 'endTime': '09:00'})
        assert r.status_code == 400
        assert 'endTime' in r.data['error']['fields']

    def test_doctor_cannot_post_to_colleagues_schedule(self, other_doctor_client, doctor):
        r = other_doctor_client.post(reverse('doctor_schedule', args=[doctor.id]),
                                     {'dayOfWeek': 1, 'startTime': '09:00', 'endTime': '17:00'})
        assert r.status_code == 403


class TestPatientRoleRequired:
    def test_no_patient_info_for_a_doctor(self, doctor_client, other_doctor):
        r = doctor_client.post(reverse('patient_info', args=[other_doctor.id]), {'allergies': ['Dust']})
        assert r.status_code == 404
        assert r.data['error']['message'] == 'Patient not found'

    def test_no_medical_record_for_a_doctor(self, doctor_client, other_doctor):
        r = doctor_client.post(reverse('records_list'), {'patientId': other_doctor.id, 'diagnosis': 'Flu'})
        assert r.status_code == 404
        assert not MedicalRecord.objects.exists()

    def test_no_prescription_or_file_for_a_doctor(self, doctor_client, other_doctor):
        r = doctor_client.post(reverse('prescriptions_list'), {'patientId': other_doctor.id})
        assert r.status_code == 404
        r = doctor_client.post(reverse('files_upload'), {
            'patientId': other_doctor.id, 'fileType': 'application/pdf', 'fileName': 'x.pdf', 'fileData': PDF})
        assert r.status_code == 404
        assert not Prescription.objects.exists()
        assert not MedicalFile.objects.exists()
