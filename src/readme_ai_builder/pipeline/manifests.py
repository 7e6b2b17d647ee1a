"""Extract package names from the dependency manifests found at a repository root."""

import json
import re
import tomllib
from collections.abc import Callable, Iterable
from typing import Any

MAX_DEPENDENCIES = 25

REQUIREMENT_NAME_SPLIT = re.compile(r"[\s<>=!~;\[@(]")
GO_REQUIRE_LINE = re.compile(r"^\s*([^\s()]+)\s+v\S+")


class ManifestParseError(ValueError):
    """The manifest could not be parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not parse {path}: {reason}")


def _dedupe(names: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []

    for name in names:
        if name and name not in seen:
            seen.add(name)
            unique.append(name)

    return unique


def _requirement_name(requirement: str) -> str:
    return REQUIREMENT_NAME_SPLIT.split(requirement.strip(), maxsplit=1)[0].strip()


def parse_package_json(text: str) -> list[str]:
    try:
        data: Any = json.loads(text)  # pyright: ignore[reportAny]
    except json.JSONDecodeError as e:
        raise ManifestParseError("package.json", str(e)) from e

    if not isinstance(data, dict):
        raise ManifestParseError("package.json", "expected a JSON object")

    def _keys(key: str) -> list[str]:
        section: Any = data.get(key)  # pyright: ignore[reportUnknownMemberType]
        return list(section.keys()) if isinstance(section, dict) else []  # pyright: ignore[reportUnknownArgumentType]

    return _keys("dependencies") or _keys("devDependencies")


def parse_requirements_txt(text: str) -> list[str]:
    names: list[str] = []

    for line in text.splitlines():
        stripped = line.split("#", 1)[0].strip()
        if not stripped or stripped.startswith("-"):
            continue
        names.append(_requirement_name(stripped))

    return names


def parse_pyproject_toml(text: str) -> list[str]:
    try:
        data: dict[str, Any] = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ManifestParseError("pyproject.toml", str(e)) from e

    names: list[str] = []

    project: dict[str, Any] = data.get("project") or {}
    for dependency in project.get("dependencies") or []:  # pyright: ignore[reportAny]
        if isinstance(dependency, str):
            names.append(_requirement_name(dependency))

    poetry: dict[str, Any] = (data.get("tool") or {}).get("poetry") or {}
    poetry_dependencies: dict[str, Any] = poetry.get("dependencies") or {}
    names.extend(name for name in poetry_dependencies if name.lower() != "python")

    return names


def parse_cargo_toml(text: str) -> list[str]:
    try:
        data: dict[str, Any] = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ManifestParseError("Cargo.toml", str(e)) from e

    dependencies: Any = data.get("dependencies")

    return list(dependencies.keys()) if isinstance(dependencies, dict) else []  # pyright: ignore[reportUnknownArgumentType, reportUnknownMemberType]


def parse_go_mod(text: str) -> list[str]:
    names: list[str] = []
    in_require_block = False

    for line in text.splitlines():
        stripped = line.split("//", 1)[0].strip()

        if stripped.startswith("require ("):
            in_require_block = True
            continue

        if in_require_block:
            if stripped == ")":
                in_require_block = False
            elif match := GO_REQUIRE_LINE.match(stripped):
                names.append(match.group(1))
            continue

        if stripped.startswith("require ") and (match := GO_REQUIRE_LINE.match(stripped.removeprefix("require "))):
            names.append(match.group(1))

    return names


# Checked in order, the first manifest present at the root wins.
MANIFEST_PARSERS: dict[str, Callable[[str], list[str]]] = {
    "package.json": parse_package_json,
    "pyproject.toml": parse_pyproject_toml,
    "requirements.txt": parse_requirements_txt,
    "Cargo.toml": parse_cargo_toml,
    "go.mod": parse_go_mod,
}


def parse_manifest(path: str, text: str) -> list[str]:
    """Parse a manifest into its unique package names, in declaration order.

    Raises:
        ManifestParseError: If the manifest is malformed.
        KeyError: If there is no parser for the manifest.
    """

    parser = MANIFEST_PARSERS[path]

    try:
        names: list[str] = parser(text)
    except (AttributeError, TypeError) as e:
        raise ManifestParseError(path, f"unexpected structure: {e}") from e

    return _dedupe(names)[:MAX_DEPENDENCIES]
