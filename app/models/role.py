"""User role enum for role-based access control."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    Roles a user can hold inside their tenant.

    - ADMIN: everything a USER can do, plus managing the tenant's members
      (list, change roles, reset passwords, remove)
    - USER: read/write access to the tenant's policies and investments

    The first account registered under a tenant becomes ADMIN.
    """

    ADMIN = "admin"
    USER = "user"
