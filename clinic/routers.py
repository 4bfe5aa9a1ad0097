"""
URL mappings for the MediCare API.

Paths mirror the ones the single-page client calls.  Trailing slashes
are deliberately omitted (``APPEND_SLASH`` is off).
"""
from django.urls import include, path

from .auth_views import change_password_view, jwt_logout_view, jwt_refresh_view, login_view, register_view
from .views import appointments, files, health, invoices, patients, prescriptions, records, schedules, users

urlpatterns = [
    path('healthz', health.healthz, name='healthz'),
    path('', include('django_prometheus.urls')),  # /metrics

    # Auth
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/register', register_view, name='register_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
    path('api/auth/change-password', change_password_view, name='change_password'),

    # Users
    path('api/users', users.users_list, name='users_list'),
    path('api/users/<int:pk>', users.user_detail, name='user_detail'),

    # Patients
    path('api/patients/<int:patient_id>/info', patients.patient_info, name='patient_info'),
    path('api/patients/<int:patient_id>/medical-records', patients.patient_records, name='patient_records'),
    path('api/patients/<int:patient_id>/files', patients.patient_files, name='patient_files'),
    path('api/patients/<int:patient_id>/invoices', patients.patient_invoices, name='patient_invoices'),

    # Doctor schedules
    path('api/doctors/<int:doctor_id>/schedule', schedules.doctor_schedule, name='doctor_schedule'),
    path('api/doctors/schedule/<int:schedule_id>', schedules.schedule_detail, name='schedule_detail'),
    path('api/doctors/<int:doctor_id>/available-slots', schedules.available_slots, name='available_slots'),

    # Appointments
    path('api/appointments', appointments.appointments_list, name='appointments_list'),
    path('api/appointments/<int:pk>', appointments.appointment_detail, name='appointment_detail'),

    # Medical records
    path('api/medical-records', records.records_list, name='records_list'),
    path('api/medical-records/<int:pk>', records.record_detail, name='record_detail'),

    # Prescriptions
    path('api/prescriptions', prescriptions.prescriptions_list, name='prescriptions_list'),
    path('api/prescriptions/<int:pk>', prescriptions.prescription_detail, name='prescription_detail'),
    path('api/prescriptions/<int:pk>/items', prescriptions.prescription_items, name='prescription_items'),

    # Medical files
    path('api/medical-files', files.files_upload, name='files_upload'),
    path('api/medical-files/<int:pk>', files.file_detail, name='file_detail'),

    # Invoices
    path('api/invoices', invoices.invoices_list, name='invoices_list'),
    path('api/invoices/<int:pk>', invoices.invoice_detail, name='invoice_detail'),
    path('api/invoices/<int:pk>/items', invoices.invoice_items, name='invoice_items'),
    path('api/invoices/<int:pk>/download', invoices.invoice_download, name='invoice_download'),
]
