"""
Doctor and administrator accounts.
"""
