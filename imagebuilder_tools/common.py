"""
Script: imagebuilder_tools/common.py
What: Shared helper functions and error types used by all `imagebuilder_tools` modules.
Doing: Defines the error taxonomy, wraps env reads, and writes workflow step outputs.
Why: Avoids duplicated helper code.
Goal: Keep behavior consistent across all helper modules.
"""

from __future__ import annotations

import os
from typing import Mapping


DEFAULT_REGION = "us-east-1"


class ImageBuilderToolError(RuntimeError):
    """Raised when a helper hits a known error condition."""


class MalformedVersionError(ImageBuilderToolError):
    """Raised when an identifier does not end in a valid semantic version."""


class EmptyResultError(ImageBuilderToolError):
    """Raised when a paged listing yields no items at all."""


class NotFoundError(ImageBuilderToolError):
    """Raised when a listing that must match something matches nothing."""


class RemoteError(ImageBuilderToolError):
    """Raised when an Image Builder API call fails."""


class PromotionIncompleteError(RemoteError):
    """
    Raised when a new recipe was created but the pipeline was not repointed.

    The created recipe is left behind with no pipeline using it, so the ARN is
    kept on the exception for whoever has to clean it up.
    """

    def __init__(self, message: str, *, orphaned_recipe_arn: str) -> None:
        super().__init__(f"{message}\nOrphaned image recipe: {orphaned_recipe_arn}")
        self.orphaned_recipe_arn = orphaned_recipe_arn


def require_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    value = os.environ.get(name)
    if value is None or value == "":
        raise ImageBuilderToolError(f"Missing required environment variable: {name}")
    return value


def optional_env(name: str, default: str = "") -> str:
    """Return an environment variable with a fallback default."""
    return os.environ.get(name, default)


def resolve_region(session_region: str | None = None) -> str:
    """
    Pick the AWS region for Image Builder calls.

    Order: `AWS_REGION`, `AWS_DEFAULT_REGION`, the boto3 session region,
    then `us-east-1`.
    """
    return (
        optional_env("AWS_REGION")
        or optional_env("AWS_DEFAULT_REGION")
        or session_region
        or DEFAULT_REGION
    )


def write_github_outputs(values: Mapping[str, str]) -> None:
    """
    Write step outputs for GitHub Actions.

    GitHub provides a file path in `GITHUB_OUTPUT`; writing `name=value` lines
    there makes that value available to later steps in the same job. Outside
    of Actions the variable is unset and nothing is written.
    """
    output_file = optional_env("GITHUB_OUTPUT")
    if not output_file:
        return
    with open(output_file, "a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(f"{key}={value}\n")
