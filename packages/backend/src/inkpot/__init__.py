"""Inkpot: a minimal blogging backend.

User signup/signin with stateless bearer tokens, and blog CRUD where
every read and write is scoped to the requesting author.
"""

__version__ = "0.1.0"
