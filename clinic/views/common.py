from rest_framework.exceptions import NotFound

from clinic.services.store import EntityStore, users


def fetch(store: EntityStore, pk, message: str):
    """Return the record or raise ``NotFound(message)``."""
    obj = store.get(pk)
    if obj is None:
        raise NotFound(message)
    return obj


def fetch_patient(pk):
    """Return the user ``pk`` if it holds the patient role, else raise ``NotFound``."""
    patient = users.get(pk)
    if patient is None or not patient.is_patient:
        raise NotFound('Patient not found')
    return patient
