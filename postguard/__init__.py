"""Postguard - role-based access control for a posts/users API."""

__version__ = "0.1.0"
