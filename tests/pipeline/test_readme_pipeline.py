import pytest
from github import GithubException

from readme_ai_builder.clients.github import GitHubClientFactory
from readme_ai_builder.errors import AuthError, GenerationError, NotFoundError
from readme_ai_builder.models.credential import AccessCredential
from readme_ai_builder.models.readme import CommitResult, ReadmeDraft
from readme_ai_builder.pipeline.commit import README_PATH
from readme_ai_builder.pipeline.readme import ReadmePipeline
from tests.conftest import MockPyGithub, MockReadmeGenerator, MockRepositoryData
from tests.constants import MOCK_README_CONTENT


@pytest.fixture
def pipeline(client_factory: GitHubClientFactory, mock_generator: MockReadmeGenerator) -> ReadmePipeline:
    return ReadmePipeline(client_factory=client_factory, generator=mock_generator)


async def test_list_repositories(pipeline: ReadmePipeline, credential: AccessCredential):
    repositories = await pipeline.list_repositories(credential=credential)

    assert {repository.name for repository in repositories} == {"hello-world", "empty"}


async def test_list_repositories_rejected_credential(pipeline: ReadmePipeline, credential: AccessCredential, mock_github: MockPyGithub):
    mock_github.login = None

    with pytest.raises(AuthError):
        await pipeline.list_repositories(credential=credential)


async def test_list_repositories_failure(pipeline: ReadmePipeline, credential: AccessCredential, mock_github: MockPyGithub):
    mock_github.failures["get_repos"] = GithubException(500, {"message": "Server Error"})

    with pytest.raises(NotFoundError):
        await pipeline.list_repositories(credential=credential)


async def test_analyze_repository(pipeline: ReadmePipeline, credential: AccessCredential):
    snapshot = await pipeline.analyze_repository(credential=credential, owner="octocat", repo="hello-world")

    assert snapshot.dependencies == "express, lodash"


async def test_suggest_sections(client_factory: GitHubClientFactory, credential: AccessCredential):
    generator = MockReadmeGenerator(responses=['{"sections": ["Features", "Usage", "License"]}'])
    pipeline = ReadmePipeline(client_factory=client_factory, generator=generator)

    suggestions = await pipeline.suggest_sections(credential=credential, owner="octocat", repo="hello-world")

    assert suggestions.sections == ["Features", "Usage", "License"]


async def test_draft_readme(pipeline: ReadmePipeline, credential: AccessCredential, mock_generator: MockReadmeGenerator):
    draft: ReadmeDraft = await pipeline.draft_readme(credential=credential, owner="octocat", repo="hello-world")

    assert draft.readme_content == MOCK_README_CONTENT
    assert draft.request.custom_prompt == "Generate a README for a JavaScript project. The project is a tiny express server."
    assert draft.request.dependencies == "express, lodash"

    _, user_prompt = mock_generator.prompts[0]
    assert "Repository Name: hello-world" in user_prompt


async def test_draft_readme_custom_instruction(pipeline: ReadmePipeline, credential: AccessCredential, mock_generator: MockReadmeGenerator):
    draft: ReadmeDraft = await pipeline.draft_readme(
        credential=credential, owner="octocat", repo="hello-world", custom_instruction="Write for data scientists."
    )

    assert draft.request.custom_prompt == "Write for data scientists."

    _, user_prompt = mock_generator.prompts[0]
    assert "# Custom Prompt\nWrite for data scientists." in user_prompt


async def test_draft_readme_does_not_commit(pipeline: ReadmePipeline, credential: AccessCredential, mock_github: MockPyGithub):
    await pipeline.draft_readme(credential=credential, owner="octocat", repo="hello-world")

    assert mock_github.commits == []


async def test_draft_readme_generation_failure(client_factory: GitHubClientFactory, credential: AccessCredential):
    pipeline = ReadmePipeline(client_factory=client_factory, generator=MockReadmeGenerator(responses=['{"readme": "# hello"}']))

    with pytest.raises(GenerationError):
        await pipeline.draft_readme(credential=credential, owner="octocat", repo="hello-world")


async def test_draft_readme_missing_repository(pipeline: ReadmePipeline, credential: AccessCredential, mock_generator: MockReadmeGenerator):
    with pytest.raises(NotFoundError):
        await pipeline.draft_readme(credential=credential, owner="octocat", repo="missing")

    assert mock_generator.prompts == []


async def test_draft_then_commit(pipeline: ReadmePipeline, credential: AccessCredential, hello_world_repository: MockRepositoryData):
    draft: ReadmeDraft = await pipeline.draft_readme(credential=credential, owner="octocat", repo="hello-world")

    result: CommitResult = await pipeline.commit_readme(credential=credential, owner="octocat", repo="hello-world", content=draft.readme_content)

    assert result.created is True
    assert hello_world_repository.files[README_PATH] == MOCK_README_CONTENT
