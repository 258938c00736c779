"""
San Rafael clinic REST API.
"""
