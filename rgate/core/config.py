"""Typed release configuration.

The release flow never reads ambient process state directly: everything it
needs (repository path, manifest, branches, remote, quality checks) is
carried by a ReleaseConfig. Values come from an optional release.toml at
the repository root, falling back to defaults that match a Cargo project
released from `main` on `origin`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_list,
    get_str,
    get_str_list,
    get_table,
)

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CHECKS",
    "CheckSpec",
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "release.toml"

DEFAULT_MANIFEST = "Cargo.toml"
DEFAULT_BRANCH = "main"
DEFAULT_FALLBACK_BRANCH = "master"
DEFAULT_REMOTE = "origin"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when release.toml cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class CheckSpec:
    """One quality gate: a command that must exit 0.

    Attributes:
        name: Short identifier shown in progress output (e.g. "lint")
        command: argv executed from the repository root
        hint: Remediation printed when the command fails
        quiet: Discard stdout (smoke tests only care about the exit status)
    """

    name: str
    command: tuple[str, ...]
    hint: str
    quiet: bool = False


DEFAULT_CHECKS: tuple[CheckSpec, ...] = (
    CheckSpec(
        name="format",
        command=("cargo", "fmt", "--all", "--", "--check"),
        hint="Code formatting check failed. Run 'cargo fmt' to fix formatting.",
    ),
    CheckSpec(
        name="lint",
        command=("cargo", "clippy", "--all-targets", "--all-features", "--", "-D", "warnings"),
        hint="Clippy lints failed. Please fix all warnings before creating a release.",
    ),
    CheckSpec(
        name="test",
        command=("cargo", "test", "--verbose"),
        hint="Tests failed. Please fix them before creating a release.",
    ),
    CheckSpec(
        name="build",
        command=("cargo", "build", "--release", "--verbose"),
        hint="Release build failed. Please fix build errors before creating a release.",
    ),
    CheckSpec(
        name="smoke-help",
        command=("cargo", "run", "--release", "--", "--help"),
        hint="CLI help command failed",
        quiet=True,
    ),
    CheckSpec(
        name="smoke-init-config",
        command=("cargo", "run", "--release", "--", "--init-config"),
        hint="CLI init-config command failed",
        quiet=True,
    ),
)


def _default_checks() -> tuple[CheckSpec, ...]:
    return DEFAULT_CHECKS


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Everything the release flow reads, made explicit.

    Attributes:
        repo_root: Directory the flow runs in (git commands, manifest, checks)
        manifest: Manifest path relative to repo_root
        release_branch: Branch releases are expected to be cut from
        fallback_branch: Remote branch compared when release_branch is absent
        remote: Remote used for tag lookup, fetch and push
        checks: Quality gates, run in order
    """

    repo_root: Path
    manifest: str = DEFAULT_MANIFEST
    release_branch: str = DEFAULT_BRANCH
    fallback_branch: str = DEFAULT_FALLBACK_BRANCH
    remote: str = DEFAULT_REMOTE
    checks: tuple[CheckSpec, ...] = field(default_factory=_default_checks)

    @property
    def manifest_path(self) -> Path:
        return self.repo_root / self.manifest

    @classmethod
    def from_dict(cls, repo_root: Path, data: Mapping[str, object]) -> ReleaseConfig:
        """Create a ReleaseConfig from parsed TOML.

        Raises:
            ValueError: If a [[checks]] entry is malformed.
        """
        release: StrDict = get_table(data, "release") or {}

        checks = DEFAULT_CHECKS
        raw_checks = get_list(data, "checks")
        if raw_checks is not None:
            checks = tuple(_parse_check(i, item) for i, item in enumerate(raw_checks))

        return cls(
            repo_root=repo_root,
            manifest=get_str(release, "manifest") or DEFAULT_MANIFEST,
            release_branch=get_str(release, "branch") or DEFAULT_BRANCH,
            fallback_branch=get_str(release, "fallback_branch") or DEFAULT_FALLBACK_BRANCH,
            remote=get_str(release, "remote") or DEFAULT_REMOTE,
            checks=checks,
        )


def _parse_check(index: int, item: object) -> CheckSpec:
    table = as_str_dict(item)
    if table is None:
        raise ValueError(f"checks[{index}] must be a table")

    name = get_str(table, "name")
    if name is None:
        raise ValueError(f"checks[{index}] is missing 'name'")

    command = get_str_list(table, "command")
    if not command:
        raise ValueError(f"checks[{index}] ({name}) needs a non-empty 'command' list")

    return CheckSpec(
        name=name,
        command=tuple(command),
        hint=get_str(table, "hint") or f"{name} failed",
        quiet=get_bool(table, "quiet") or False,
    )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path, *, repo_root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load release settings from a TOML file.

    Args:
        path: Path to release.toml
        repo_root: Repository the resulting config applies to

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(repo_root, result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(repo_root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load repo_root/release.toml, or defaults when the file does not exist.

    A file that exists but is invalid is still reported as an error.
    """
    path = repo_root / CONFIG_FILENAME
    if not path.exists():
        return Ok(ReleaseConfig(repo_root=repo_root))
    return load_config(path, repo_root=repo_root)
