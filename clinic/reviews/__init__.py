"""
Patient reviews of doctors.
"""
