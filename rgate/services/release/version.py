from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from rgate.core.result import Err, Ok, Result
from rgate.services.release.errors import GateError

TAG_PREFIX = "v"

_VERSION_LINE_RE = re.compile(r'^version = "([^"]*)"')
_CHUNK_RE = re.compile(r"(\d+)")


@dataclass(frozen=True, slots=True)
class VersionDescriptor:
    version: str

    @property
    def tag(self) -> str:
        return f"{TAG_PREFIX}{self.version}"


def read_version(*, manifest: Path) -> Result[VersionDescriptor, GateError]:
    """Extract the release version from a manifest.

    Takes the first line of the form `version = "<value>"`. This is a line
    match, not a TOML parse: the first such line wins whichever table it is in.
    """
    try:
        text = manifest.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            GateError(
                kind="manifest_missing",
                message=f"{manifest.name} not found in {manifest.parent}",
            )
        )
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            GateError(
                kind="manifest_missing",
                message=f"failed to read {manifest.name}: {e}",
                hint=str(manifest),
            )
        )

    for line in text.splitlines():
        m = _VERSION_LINE_RE.match(line)
        if m is None:
            continue
        value = m.group(1).strip()
        if not value:
            break
        return Ok(VersionDescriptor(version=value))

    return Err(
        GateError(
            kind="version_missing",
            message=f"Could not extract version from {manifest.name}",
            hint=f'Expected a line like: version = "1.2.3" in {manifest}',
        )
    )


def version_sort_key(name: str) -> tuple[tuple[int, int | str], ...]:
    """Natural ordering for version-like names (v1.9.0 < v1.10.0).

    Digit runs compare numerically, everything else lexically; a numeric
    chunk sorts before a text chunk at the same position.
    """
    key: list[tuple[int, int | str]] = []
    for chunk in _CHUNK_RE.split(name):
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((0, int(chunk)))
        else:
            key.append((1, chunk))
    return tuple(key)


def recent_version_tags(tags: list[str], *, limit: int = 5) -> list[str]:
    """The `limit` highest `v*` tags, in ascending version order."""
    matching = sorted((t for t in tags if t.startswith(TAG_PREFIX)), key=version_sort_key)
    return matching[-limit:] if limit > 0 else []
