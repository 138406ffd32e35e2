"""Uniform API client implementation."""

from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests
from loguru import logger
from pydantic import BaseModel

from ..config.config import APIConfig
from ..models.member import (
    DeleteMemberRequest,
    InviteMemberRequest,
    Member,
    ProjectInvite,
    UpdateMemberRequest,
)
from .exceptions import UniformAuthenticationError, UniformConnectionError

MEMBERS_ENDPOINT = '/members'


class APIResponse(BaseModel):
    """Standard API response wrapper.

    Error responses are returned as values with ``success`` set to False; only
    requests that never got a response raise.
    """

    status_code: int
    status_text: str
    data: Any
    success: bool


def projects_to_invites(member: Member) -> List[ProjectInvite]:
    """Convert a member's project roles to the shape used by invitations.

    Args:
        member: Member whose projects are converted

    Returns:
        One project invite per project, in the member's project order
    """
    return [
        ProjectInvite(
            project_id=project_id,
            roles=list(project_roles.roles),
            permissions=project_roles.custom_permissions,
            use_custom=bool(project_roles.custom_permissions),
        )
        for project_id, project_roles in member.projects.items()
    ]


class UniformClient:
    """Uniform members API client.

    The client is team agnostic: every call carries the API key of the team
    it acts on.
    """

    def __init__(self, config: APIConfig):
        """Initialize Uniform client.

        Args:
            config: API endpoint configuration
        """
        self.config = config
        self.base_url = config.url.rstrip('/')
        self.timeout = config.timeout
        self.session = requests.Session()

        # Set common headers
        self.session.headers.update(
            {
                'Content-Type': 'application/json',
                'User-Agent': 'uniform-sso-migrate/0.1.0',
            }
        )

        logger.info(f'Initialized Uniform client for {config.url}')

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Args:
            endpoint: API endpoint path

        Returns:
            Full API URL
        """
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    @staticmethod
    def _auth_headers(api_key: str) -> Dict[str, str]:
        if not api_key:
            raise UniformAuthenticationError('No API key provided for request')
        return {'x-api-key': api_key}

    def _handle_response(
        self, response: requests.Response, error_data: Any = None
    ) -> APIResponse:
        """Convert an HTTP response to the standard format.

        Args:
            response: Raw HTTP response
            error_data: Data to report when the response is an error

        Returns:
            Standardized API response
        """
        success = response.ok

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = response.text

        if success:
            status_text = response.reason or ''
        else:
            status_text = response.reason or 'Unknown Error'
            logger.error(
                f'Request to {response.url} failed with status: {response.status_code}'
            )
            logger.debug(f'Error response data: {data}')
            data = data if data is not None else error_data

        return APIResponse(
            status_code=response.status_code,
            status_text=status_text,
            data=data,
            success=success,
        )

    def _request(
        self,
        method: str,
        endpoint: str,
        api_key: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        error_data: Any = None,
    ) -> APIResponse:
        """Send one request and wrap the result.

        Raises:
            UniformConnectionError: If no response was received
        """
        url = self._build_url(endpoint)
        logger.debug(f'Making {method} request to {endpoint} with data: {data}')

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=data,
                headers=self._auth_headers(api_key),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f'Network error during {method} request: {e}')
            raise UniformConnectionError(f'Network error: {e}')

        logger.debug(
            f'{method} {endpoint} response status: '
            f'{response.status_code} {response.reason}'
        )
        return self._handle_response(response, error_data=error_data)

    def list_members(
        self, team_id: str, api_key: str, include_metadata: bool = True
    ) -> APIResponse:
        """Get all members of a team.

        Args:
            team_id: Team ID
            api_key: API key for the team
            include_metadata: Whether to include member metadata

        Returns:
            API response whose data is the list of member records exactly as
            received (empty on error); records are validated by the caller
        """
        params = {
            'teamId': team_id,
            'type': 'member',
            'includeMetadata': 'true' if include_metadata else 'false',
        }
        response = self._request(
            'GET', MEMBERS_ENDPOINT, api_key, params=params, error_data=[]
        )

        if not response.success:
            response.data = []
            return response

        payload = response.data or {}
        response.data = list(payload.get('members', []))
        return response

    def invite_member(self, request: InviteMemberRequest, api_key: str) -> APIResponse:
        """Invite a member to a team.

        Args:
            request: Invitation request
            api_key: API key for the team

        Returns:
            API response
        """
        return self._request(
            'POST', MEMBERS_ENDPOINT, api_key, data=request.to_payload(), error_data={}
        )

    def update_member(self, request: UpdateMemberRequest, api_key: str) -> APIResponse:
        """Update an existing member.

        Args:
            request: Update request
            api_key: API key for the team

        Returns:
            API response
        """
        return self._request(
            'PATCH', MEMBERS_ENDPOINT, api_key, data=request.to_payload(), error_data={}
        )

    def delete_member(self, request: DeleteMemberRequest, api_key: str) -> APIResponse:
        """Remove a member from a team.

        Args:
            request: Delete request
            api_key: API key for the team

        Returns:
            API response
        """
        return self._request(
            'DELETE',
            MEMBERS_ENDPOINT,
            api_key,
            data=request.to_payload(),
            error_data={},
        )

    def close(self):
        """Close the client session."""
        self.session.close()
        logger.info('Uniform client session closed')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


class UniformClientFactory:
    """Factory for creating Uniform API clients."""

    @staticmethod
    def create_client(config: APIConfig) -> UniformClient:
        """Create Uniform client from configuration.

        Args:
            config: API endpoint configuration

        Returns:
            Configured Uniform client
        """
        return UniformClient(config)
