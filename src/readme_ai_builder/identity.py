"""Exchange a session artifact for the access credential of the signed-in user."""

from logging import Logger
from typing import Protocol

from fastmcp.utilities.logging import get_logger

from readme_ai_builder.clients.errors.github import AuthenticationFailedError, ClientError
from readme_ai_builder.clients.github import GitHubClientFactory, new_github_client
from readme_ai_builder.clients.models.github import AuthenticatedUser
from readme_ai_builder.errors import AuthError
from readme_ai_builder.models.credential import AccessCredential


class IdentityProvider(Protocol):
    async def verify(self, session_artifact: str | None) -> str:
        """Verify a session artifact and return the id of the user it belongs to.

        Raises:
            AuthError: If the artifact is missing or invalid.
        """
        ...

    def get_access_credential(self, user_id: str) -> AccessCredential | None:
        """Return the credential stored for a verified user, if any."""
        ...


class GitHubTokenIdentityProvider:
    """Treats the session artifact as a GitHub token and verifies it against the authenticated user endpoint.

    Verified credentials are kept in memory, keyed by login, for the lifetime of the process.
    """

    def __init__(self, client_factory: GitHubClientFactory | None = None, logger: Logger | None = None):
        self.client_factory: GitHubClientFactory = client_factory or new_github_client
        self.logger: Logger = logger or get_logger(name=__name__)
        self._credentials: dict[str, AccessCredential] = {}

    async def verify(self, session_artifact: str | None) -> str:
        credential: AccessCredential = AccessCredential.from_token(token=session_artifact)

        client = self.client_factory(credential)

        try:
            user: AuthenticatedUser = await client.get_authenticated_user()
        except AuthenticationFailedError as e:
            raise AuthError(message="GitHub rejected the access credential.") from e
        except ClientError as e:
            raise AuthError(message="The access credential could not be verified.", extra_info={"error": str(e)}) from e

        self._credentials[user.login] = credential

        self.logger.debug(f"Verified the access credential of {user.login}")

        return user.login

    def get_access_credential(self, user_id: str) -> AccessCredential | None:
        return self._credentials.get(user_id)


async def resolve_credential(identity_provider: IdentityProvider, session_artifact: str | None) -> AccessCredential:
    """Resolve the access credential of the user a session artifact belongs to.

    Raises:
        AuthError: If the artifact cannot be verified or no credential is stored for its user.
    """

    user_id: str = await identity_provider.verify(session_artifact=session_artifact)

    if credential := identity_provider.get_access_credential(user_id=user_id):
        return credential

    raise AuthError(message="No access credential is stored for the user.", extra_info={"user": user_id})
