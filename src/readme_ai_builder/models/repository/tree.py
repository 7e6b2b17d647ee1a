from fnmatch import fnmatch
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from github.GitTree import GitTree

DEFAULT_EXCLUDE_PATTERNS: list[str] = [
    ".git/*",
    "*/.git/*",
    "node_modules/*",
    "*/node_modules/*",
    "vendor/*",
    "dist/*",
    "build/*",
    "__pycache__/*",
    "*/__pycache__/*",
    "*.lock",
    "*.min.js",
    "*.map",
    "package-lock.json",
    "pnpm-lock.yaml",
    "yarn.lock",
    ".DS_Store",
    "*/.DS_Store",
]


def matches_exclude(full_path: str, exclude_patterns: list[str] | None) -> bool:
    if exclude_patterns is None:
        return False

    return any(fnmatch(full_path, exclude_pattern) for exclude_pattern in exclude_patterns)


def get_dir_and_file_from_path(path: str) -> tuple[str, str]:
    path_parts = path.split("/")
    directory_path = "/".join(path_parts[:-1])
    file_path = path_parts[-1]
    return directory_path, file_path


class RepositoryTreeDirectory(BaseModel):
    path: str
    files: list[str]

    @property
    def file_paths(self) -> list[str]:
        return [f"{self.path}/{file}" for file in self.files]

    @property
    def count_files(self) -> int:
        return len(self.files)


class RepositoryTree(BaseModel):
    """The blobs of a git tree, with root files kept apart from files in directories."""

    directories: list[RepositoryTreeDirectory] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    truncated: bool = Field(
        default=False,
        description="Whether the results have been truncated. If true, the results do not contain all files.",
    )

    @field_validator("directories")
    @classmethod
    def validate_directories(cls, v: list[RepositoryTreeDirectory]) -> list[RepositoryTreeDirectory]:
        return [directory for directory in v if directory.files]

    @classmethod
    def from_git_tree(cls, git_tree: "GitTree", exclude_patterns: list[str] | None = None) -> "RepositoryTree":
        directories: dict[str, RepositoryTreeDirectory] = {}
        files: list[str] = []

        for tree_item in git_tree.tree:
            if tree_item.type != "blob" or not tree_item.path:
                continue

            if matches_exclude(full_path=tree_item.path, exclude_patterns=exclude_patterns):
                continue

            directory_path, file_path = get_dir_and_file_from_path(tree_item.path)

            if not directory_path:
                files.append(file_path)
                continue

            directory = directories.setdefault(directory_path, RepositoryTreeDirectory(path=directory_path, files=[]))
            directory.files.append(file_path)

        return cls(directories=list(directories.values()), files=files, truncated=bool(git_tree.truncated))

    def file_paths(self) -> list[str]:
        """Return all files in the tree, root files first."""
        all_file_paths: list[str] = list(self.files)

        for directory in self.directories:
            all_file_paths.extend(directory.file_paths)

        return all_file_paths

    def has_root_file(self, name: str) -> bool:
        return name in self.files

    @property
    def count_files(self) -> int:
        return len(self.files) + sum(directory.count_files for directory in self.directories)

    def truncate(self, limit_results: int) -> "RepositoryTree":
        if len(self.files) >= limit_results:
            return RepositoryTree(
                files=self.files[:limit_results], directories=[], truncated=self.truncated or self.count_files > limit_results
            )

        truncated_directories: list[RepositoryTreeDirectory] = []

        truncated: bool = self.truncated

        for directory in self.directories:
            current_count = sum(len(directory.files) for directory in truncated_directories) + len(self.files)

            if len(directory.files) + current_count <= limit_results:
                truncated_directories.append(directory)
                continue

            truncated = True
            remaining_count = limit_results - current_count

            if remaining_count == 0:
                break

            truncated_directories.append(RepositoryTreeDirectory(path=directory.path, files=directory.files[:remaining_count]))

        return RepositoryTree(files=self.files, directories=truncated_directories, truncated=truncated)
