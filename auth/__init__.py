"""
Auth package for the Relink admin console.

Single shared admin password (PBKDF2-hashed in the store) and bearer
session tokens that the store expires on its own.
"""
