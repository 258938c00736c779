"""
Patient accounts and profiles.
"""
