"""
Clinic departments.
"""
