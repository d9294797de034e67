"""Member role enum for tenant-scoped access control."""

from enum import Enum as PyEnum


class Role(str, PyEnum):
    """
    Member roles inside a church, lowest to highest.

    - MEMBER: regular member, sees their own branch
    - COORDINATOR: eligible for restricted permissions
    - ADMINFILIAL: branch administrator, may assign permissions in their branch
    - ADMINGERAL: general administrator of the whole church

    Ordering is a linear rank (see churchapp.core.role_policy.role_rank),
    not inheritance.
    """

    MEMBER = "MEMBER"
    COORDINATOR = "COORDINATOR"
    ADMINFILIAL = "ADMINFILIAL"
    ADMINGERAL = "ADMINGERAL"
