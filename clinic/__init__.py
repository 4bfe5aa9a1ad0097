"""Clinic application for the MediCare backend.

This package contains models, serializers, services, views and route
registrations implementing the API contract expected by the
single-page client: accounts, appointments, medical records,
prescriptions and invoices.
"""
