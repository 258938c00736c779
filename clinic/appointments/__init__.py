"""
Appointment scheduling.
"""
