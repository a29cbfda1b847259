"""
Script: imagebuilder_tools/semver.py
What: Parses and orders semantic versions embedded in Image Builder ARNs.
Doing: Reads the last `/` segment of an ARN as `major.minor.patch[-pre][+build]` and compares by SemVer 2.0 precedence.
Why: Recipe listings are unordered, so "latest" has to be computed from the version text.
Goal: Give every module one strict parser and one ordering for recipe versions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from functools import total_ordering

from imagebuilder_tools.common import MalformedVersionError


SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9][0-9]*)\.(?P<minor>0|[1-9][0-9]*)\.(?P<patch>0|[1-9][0-9]*)"
    r"(?:-(?P<prerelease>(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@total_ordering
@dataclass(frozen=True, eq=False)
class SemVer:
    """
    One semantic version.

    Equality and ordering follow SemVer precedence, so build metadata is kept
    for display but never changes how two versions compare.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def _precedence(self) -> tuple:
        # A release sorts above any prerelease of the same core version.
        # Numeric identifiers sort below alphanumeric ones, and a longer
        # identifier list wins when all shared identifiers are equal.
        identifiers = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part) for part in self.prerelease
        )
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, identifiers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence() == other._precedence()

    def __lt__(self, other: "SemVer") -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __hash__(self) -> int:
        return hash(self._precedence())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def parse_version(text: str) -> SemVer:
    """Parse `major.minor.patch[-prerelease][+build]` or raise `MalformedVersionError`."""
    match = SEMVER_RE.match(text)
    if not match:
        raise MalformedVersionError(f"Not a semantic version: {text!r}")
    prerelease = match.group("prerelease")
    build = match.group("build")
    return SemVer(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        prerelease=tuple(prerelease.split(".")) if prerelease else (),
        build=tuple(build.split(".")) if build else (),
    )


def extract_version(identifier: str) -> SemVer:
    """
    Return the version at the end of an identifier.

    Example ARN:
    `arn:aws:imagebuilder:us-east-1:123456789012:image-recipe/base-linux/1.3.0`.
    """
    segment = identifier.rsplit("/", 1)[-1]
    if not segment:
        raise MalformedVersionError(f"Missing version segment in identifier: {identifier!r}")
    try:
        return parse_version(segment)
    except MalformedVersionError as exc:
        raise MalformedVersionError(
            f"Identifier {identifier!r} does not end in a semantic version"
        ) from exc


def bump_patch(version: SemVer) -> SemVer:
    """Return `version` with patch incremented by one; major and minor stay as they are."""
    return replace(version, patch=version.patch + 1)
