"""
Authentication module for the clinic system.

This module provides authentication and authorization functionality including:
- Patient self-registration and login for patients and doctors
- JWT session tokens via bearer header or httpOnly cookie
- Role-based and ownership-based access control
- Password recovery with 6-digit codes
"""
