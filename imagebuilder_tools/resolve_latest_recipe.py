"""
Script: imagebuilder_tools/resolve_latest_recipe.py
What: Finds the newest recipe version and the pipeline for one recipe name.
Doing: Scans every recipe listing page for the highest semantic version, fetches that recipe, and looks up the matching pipeline.
Why: Image Builder lists recipe versions unordered and paged, so "latest" is not something the API hands back.
Goal: Give promotion (and humans) one reliable answer to "which recipe is current?".
"""

from __future__ import annotations

import argparse
from typing import Any

from imagebuilder_tools.common import EmptyResultError, NotFoundError, write_github_outputs
from imagebuilder_tools.imagebuilder import Filter, ImageBuilder, name_filter
from imagebuilder_tools.pagination import select_max
from imagebuilder_tools.semver import extract_version


def summary_version(summary: dict):
    """Ordering key for a recipe summary: the version at the end of its ARN."""
    return extract_version(str(summary.get("arn") or ""))


def resolve_latest_recipe(image_builder: Any, filters: list[Filter]) -> dict:
    """
    Return full detail for the highest-versioned recipe matching `filters`.

    Raises `NotFoundError` when no recipe matches. Malformed versions and API
    failures propagate unchanged.
    """
    try:
        latest = select_max(
            lambda token: image_builder.list_image_recipes(filters, token),
            key=summary_version,
        )
    except EmptyResultError as exc:
        raise NotFoundError(f"No image recipes match filter {filters}") from exc
    return image_builder.get_image_recipe(latest["arn"])


def resolve_pipeline(image_builder: Any, filters: list[Filter]) -> dict:
    """Return the first pipeline matching `filters`. No ordering is applied."""
    pipelines = image_builder.list_image_pipelines(filters)
    if not pipelines:
        raise NotFoundError(f"No image pipelines match filter {filters}")
    return pipelines[0]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imagebuilder-tools resolve-latest-recipe",
        description="Print the newest version of one image recipe.",
    )
    parser.add_argument("name", help="Image recipe name.")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    recipe = resolve_latest_recipe(ImageBuilder.from_environment(), name_filter(args.name))

    recipe_arn = str(recipe.get("arn") or "")
    recipe_version = str(recipe.get("version") or "")
    parent_image = str(recipe.get("parentImage") or "")

    write_github_outputs(
        {
            "image_recipe_arn": recipe_arn,
            "image_recipe_version": recipe_version,
            "parent_image": parent_image,
        }
    )
    print(f"Latest image recipe: {recipe_arn}")
    print(f"Version: {recipe_version}")
    print(f"Parent image: {parent_image}")


if __name__ == "__main__":
    main()
