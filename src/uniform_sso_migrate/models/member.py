"""Team member models."""

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Permission(str, Enum):
    """Custom project permission tokens accepted by the Uniform API."""

    OPT_CREATE_ENRICHMENTS = 'OPT_CREATE_ENRICHMENTS'
    OPT_CREATE_INTENTS = 'OPT_CREATE_INTENTS'
    OPT_CREATE_QUIRKS = 'OPT_CREATE_QUIRKS'
    OPT_CREATE_SIGNALS = 'OPT_CREATE_SIGNALS'
    OPT_CREATE_TESTS = 'OPT_CREATE_TESTS'
    OPT_DELETE_ENRICHMENTS = 'OPT_DELETE_ENRICHMENTS'
    OPT_DELETE_INTENTS = 'OPT_DELETE_INTENTS'
    OPT_DELETE_QUIRKS = 'OPT_DELETE_QUIRKS'
    OPT_DELETE_SIGNALS = 'OPT_DELETE_SIGNALS'
    OPT_DELETE_TESTS = 'OPT_DELETE_TESTS'
    OPT_PUB = 'OPT_PUB'
    OPT_PUBLISH = 'OPT_PUBLISH'
    OPT_READ = 'OPT_READ'
    OPT_WRITE_ENRICHMENTS = 'OPT_WRITE_ENRICHMENTS'
    OPT_WRITE_INTENTS = 'OPT_WRITE_INTENTS'
    OPT_WRITE_QUIRKS = 'OPT_WRITE_QUIRKS'
    OPT_WRITE_SIGNALS = 'OPT_WRITE_SIGNALS'
    OPT_WRITE_TESTS = 'OPT_WRITE_TESTS'
    PRM_SCHEMA = 'PRM_SCHEMA'
    PROJECT = 'PROJECT'
    RDT_ADVANCED = 'RDT_ADVANCED'
    RDT_CREATE = 'RDT_CREATE'
    RDT_DELETE = 'RDT_DELETE'
    RDT_UPDATE = 'RDT_UPDATE'
    UPM_CREATE = 'UPM_CREATE'
    UPM_DATACONN = 'UPM_DATACONN'
    UPM_DATATYPE = 'UPM_DATATYPE'
    UPM_DELETE = 'UPM_DELETE'
    UPM_PUB = 'UPM_PUB'
    UPM_PUBLISH = 'UPM_PUBLISH'
    UPM_READ = 'UPM_READ'
    UPM_RELEASE_CREATE = 'UPM_RELEASE_CREATE'
    UPM_RELEASE_DELETE = 'UPM_RELEASE_DELETE'
    UPM_RELEASE_LAUNCH = 'UPM_RELEASE_LAUNCH'
    UPM_RELEASE_UPDATE = 'UPM_RELEASE_UPDATE'
    UPM_SCHEMA = 'UPM_SCHEMA'
    UPM_WRITE = 'UPM_WRITE'
    UTM_PUB = 'UTM_PUB'
    UTM_WRITE = 'UTM_WRITE'


# Tokens the API adds later are kept as plain strings
PermissionToken = Annotated[
    Union[Permission, str], Field(union_mode='left_to_right')
]


class MemberType(str, Enum):
    """Kind of team member."""

    MEMBER = 'member'
    API_KEY = 'apiKey'


class ProjectRoles(BaseModel):
    """Roles and custom permissions a member holds on one project."""

    model_config = ConfigDict(populate_by_name=True, extra='allow')

    roles: List[str] = Field(default_factory=list, description='Role names')
    custom_permissions: Optional[List[PermissionToken]] = Field(
        default=None, alias='customPermissions', description='Custom permissions'
    )
    name: Optional[str] = Field(default=None, description='Project name')


class Member(BaseModel):
    """Uniform team member as returned by the members endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra='allow')

    subject: str = Field(..., description='Identity subject, stable across renames')
    name: str = Field(default='', description='Display name')
    email: str = Field(..., description='Email address')
    picture: Optional[str] = Field(default=None, description='Avatar URL')
    is_team_admin: bool = Field(
        default=False, alias='isTeamAdmin', description='Team administrator flag'
    )
    projects: Dict[str, ProjectRoles] = Field(
        default_factory=dict, description='Project roles keyed by project ID'
    )
    type: MemberType = Field(default=MemberType.MEMBER, description='Member kind')
    member_since: Optional[str] = Field(
        default=None, alias='memberSince', description='ISO-8601 join timestamp'
    )


class ProjectInvite(BaseModel):
    """Project assignment carried by invite and update requests."""

    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(..., alias='projectId')
    use_custom: bool = Field(default=False, alias='useCustom')
    roles: List[str] = Field(default_factory=list)
    permissions: Optional[List[PermissionToken]] = Field(default=None)


class _Request(BaseModel):
    """Base for request bodies sent to the members endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body expected by the API."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class InviteMemberRequest(_Request):
    """Body of ``POST /members``."""

    email: str
    name: Optional[str] = None
    is_admin: bool = Field(default=False, alias='isAdmin')
    team_id: str = Field(..., alias='teamId')
    projects: List[ProjectInvite] = Field(default_factory=list)
    send_email: bool = Field(default=True, alias='sendEmail')


class UpdateMemberRequest(_Request):
    """Body of ``PATCH /members``."""

    identity_subject: str
    team_id: str = Field(..., alias='teamId')
    name: Optional[str] = None
    is_admin: Optional[bool] = Field(default=None, alias='isAdmin')
    projects: Optional[List[ProjectInvite]] = None


class DeleteMemberRequest(_Request):
    """Body of ``DELETE /members``."""

    team_id: str = Field(..., alias='teamId')
    subject: str

    @field_validator('subject')
    def validate_subject(cls, v):
        """Refuse to build a delete request without a subject."""
        if not v:
            raise ValueError('subject must not be empty')
        return v
