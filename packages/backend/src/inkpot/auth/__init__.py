"""Authentication and authorization.

Users sign in with email/password and receive a stateless JWT access
token. Protected routes run the auth pipeline in dependencies.py, which
resolves the token to a CurrentIdentity used to scope every blog query.
"""
