"""Uniform SSO Migration Tool

Moves the members of Uniform teams from email/password accounts to SSO
accounts by backing up each team, retiring or deleting the existing member
records and re-inviting every member with the same project roles.
"""

__version__ = '0.1.0'

from .cli import main

__all__ = ['main', '__version__']
