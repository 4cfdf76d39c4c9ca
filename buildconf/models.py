"""
models.py

Responsibility: Typed value objects for build configurations and their JSON wire shapes.

The API is asymmetric: a build configuration is returned bare on read but must be
wrapped under `build_configuration` on create. Both shapes live here as explicit,
separately named functions and are deliberately not unified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from buildconf.transport import DecodeError


def _require_str(data: Any, key: str, what: str) -> str:
    if not isinstance(data, dict):
        raise DecodeError(f"{what}: expected a JSON object, got {type(data).__name__}")
    value = data.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"{what}: missing or non-string field `{key}`")
    return value


@dataclass(frozen=True)
class BuildConfig:
    """A named build template owned by `user`."""

    user: str
    name: str

    @classmethod
    def from_wire(cls, data: Any) -> BuildConfig:
        """Decode the bare read shape: {"username": ..., "name": ...}."""
        return cls(
            user=_require_str(data, "username", "build configuration"),
            name=_require_str(data, "name", "build configuration"),
        )

    def to_wire(self) -> dict[str, str]:
        return {"username": self.user, "name": self.name}

    def to_create_body(self) -> dict[str, dict[str, str]]:
        """Enveloped create shape: {"build_configuration": {...}}."""
        return {"build_configuration": self.to_wire()}


@dataclass(frozen=True)
class BuildConfigBuild:
    """A single builder definition within a version, e.g. type "amazon-ebs"."""

    name: str
    type: str

    def to_wire(self) -> dict[str, str]:
        return {"name": self.name, "type": self.type}


@dataclass(frozen=True)
class BuildConfigVersion:
    """One uploadable revision of the build configuration `user`/`name`."""

    user: str
    name: str
    builds: tuple[BuildConfigBuild, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable from callers but keep the value immutable.
        object.__setattr__(self, "builds", tuple(self.builds))

    def to_create_body(self) -> dict[str, Any]:
        """Only the builds go in the body; user/name are carried by the path."""
        return {"version": {"builds": [b.to_wire() for b in self.builds]}}


@dataclass(frozen=True)
class UploadTarget:
    """Server-issued, single-use destination for a version's template payload."""

    upload_path: str

    @classmethod
    def from_wire(cls, data: Any) -> UploadTarget:
        return cls(upload_path=_require_str(data, "upload_path", "version upload target"))


def builds_from_template(template: Any) -> list[BuildConfigBuild]:
    """
    Derive the build list from a Packer-style JSON template.

    Each entry of `builders` needs a `type`; its build name defaults to that type.
    """
    if not isinstance(template, dict):
        raise DecodeError("Template must be a JSON object.")
    builders = template.get("builders")
    if not isinstance(builders, list) or not builders:
        raise DecodeError("Template must define a non-empty `builders` list.")

    builds: list[BuildConfigBuild] = []
    for i, raw in enumerate(builders):
        btype = _require_str(raw, "type", f"builder #{i}")
        name = raw.get("name") or btype
        builds.append(BuildConfigBuild(name=str(name), type=btype))
    return builds
