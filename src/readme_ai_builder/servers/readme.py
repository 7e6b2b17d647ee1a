from collections.abc import Callable
from logging import Logger
from typing import Any

from fastmcp.server import FastMCP
from fastmcp.tools import Tool
from fastmcp.utilities.logging import get_logger

from readme_ai_builder.clients.models.github import RepositorySummary
from readme_ai_builder.identity import GitHubTokenIdentityProvider, IdentityProvider, resolve_credential
from readme_ai_builder.models.credential import AccessCredential
from readme_ai_builder.models.readme import CommitResult, ReadmeDraft, RepositorySnapshot, SectionSuggestions
from readme_ai_builder.pipeline.readme import ReadmePipeline
from readme_ai_builder.servers.shared.annotations import CUSTOM_PROMPT, OWNER, README_CONTENT, REPO
from readme_ai_builder.servers.shared.errors import readme_errors_as_tool_errors
from readme_ai_builder.utilities.settings import get_github_token


class ReadmeServer:
    pipeline: ReadmePipeline
    identity_provider: IdentityProvider
    logger: Logger

    def __init__(
        self,
        pipeline: ReadmePipeline | None = None,
        identity_provider: IdentityProvider | None = None,
        session_artifact_provider: Callable[[], str | None] | None = None,
        logger: Logger | None = None,
    ):
        self.logger = logger or get_logger(name=__name__)
        self.pipeline = pipeline or ReadmePipeline()
        self.identity_provider = identity_provider or GitHubTokenIdentityProvider()
        self.session_artifact_provider: Callable[[], str | None] = session_artifact_provider or get_github_token

    def register_tools(self, fastmcp: FastMCP[Any]) -> FastMCP[Any]:
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.list_repositories))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.analyze_repository))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.suggest_readme_sections))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.generate_readme))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.commit_readme))

        return fastmcp

    async def _get_credential(self) -> AccessCredential:
        return await resolve_credential(identity_provider=self.identity_provider, session_artifact=self.session_artifact_provider())

    async def list_repositories(self) -> list[RepositorySummary]:
        """List your GitHub repositories, most recently updated first."""

        with readme_errors_as_tool_errors():
            credential = await self._get_credential()
            return await self.pipeline.list_repositories(credential=credential)

    async def analyze_repository(self, owner: OWNER, repo: REPO) -> RepositorySnapshot:
        """Analyze a GitHub repository: its metadata, file structure, dependencies and license."""

        with readme_errors_as_tool_errors():
            credential = await self._get_credential()
            return await self.pipeline.analyze_repository(credential=credential, owner=owner, repo=repo)

    async def suggest_readme_sections(self, owner: OWNER, repo: REPO) -> SectionSuggestions:
        """Suggest the sections that are relevant to a README for a GitHub repository."""

        with readme_errors_as_tool_errors():
            credential = await self._get_credential()
            return await self.pipeline.suggest_sections(credential=credential, owner=owner, repo=repo)

    async def generate_readme(self, owner: OWNER, repo: REPO, custom_prompt: CUSTOM_PROMPT = None) -> ReadmeDraft:
        """Generate a README draft for a GitHub repository. The draft is not committed: review it, then use `commit_readme`."""

        with readme_errors_as_tool_errors():
            credential = await self._get_credential()
            return await self.pipeline.draft_readme(credential=credential, owner=owner, repo=repo, custom_instruction=custom_prompt)

    async def commit_readme(self, owner: OWNER, repo: REPO, content: README_CONTENT) -> CommitResult:
        """Commit a reviewed README draft to README.md on the default branch of a GitHub repository."""

        with readme_errors_as_tool_errors():
            credential = await self._get_credential()
            return await self.pipeline.commit_readme(credential=credential, owner=owner, repo=repo, content=content)
