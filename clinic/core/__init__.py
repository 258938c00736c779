"""
Shared infrastructure: security, middleware, storage and response helpers.
"""
