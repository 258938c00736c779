"""
Clinical histories and their attachments.
"""
