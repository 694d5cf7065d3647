"""Example decoration scopes for adorn.

This package demonstrates library usage but is not part of the core API.
"""
