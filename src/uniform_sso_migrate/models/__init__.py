"""Data models for Uniform team members."""

from .member import (
    DeleteMemberRequest,
    InviteMemberRequest,
    Member,
    MemberType,
    Permission,
    ProjectInvite,
    ProjectRoles,
    UpdateMemberRequest,
)

__all__ = [
    'DeleteMemberRequest',
    'InviteMemberRequest',
    'Member',
    'MemberType',
    'Permission',
    'ProjectInvite',
    'ProjectRoles',
    'UpdateMemberRequest',
]
