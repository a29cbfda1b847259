"""
Script: imagebuilder_tools/promote_recipe.py
What: Moves one Image Builder recipe/pipeline pair onto a new base image.
Doing: Resolves the latest recipe, and if its parent image differs from the target, creates the next patch version and repoints the pipeline at it.
Why: Base AMIs move regularly; the pipeline should follow without hand-editing recipes.
Goal: Keep the pipeline building from the requested AMI, touching nothing when it already does.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from typing import Any, Optional

from imagebuilder_tools.common import (
    ImageBuilderToolError,
    MalformedVersionError,
    PromotionIncompleteError,
    write_github_outputs,
)
from imagebuilder_tools.imagebuilder import Filter, ImageBuilder, name_filter
from imagebuilder_tools.resolve_latest_recipe import resolve_latest_recipe, resolve_pipeline
from imagebuilder_tools.semver import bump_patch, parse_version


@dataclass(frozen=True)
class PromotionResult:
    """What a promotion run did. `new_recipe_arn` is None when nothing changed."""

    recipe_arn: str
    promoted: bool
    new_recipe_arn: Optional[str] = None
    new_version: Optional[str] = None
    pipeline_update: Optional[dict] = None


def needs_promotion(recipe: dict, target_image: str) -> bool:
    """True when the recipe's parent image is not the target image."""
    return recipe.get("parentImage") != target_image


def next_recipe_version(recipe: dict) -> str:
    """Return the recipe version with patch + 1."""
    current = recipe.get("version")
    if not current:
        raise MalformedVersionError(f"Image recipe {recipe.get('arn')} has no version")
    return str(bump_patch(parse_version(str(current))))


def promote(image_builder: Any, filters: list[Filter], target_image: str) -> PromotionResult:
    """
    Run the whole resolve -> decide -> create -> repoint flow.

    Remote writes happen in this order only: create the recipe, then update
    the pipeline. If anything fails after the create, the error is re-raised
    as `PromotionIncompleteError` carrying the new recipe ARN.
    """
    recipe = resolve_latest_recipe(image_builder, filters)
    recipe_arn = str(recipe.get("arn") or "")
    print(f"Latest image recipe: {recipe_arn} (parent image {recipe.get('parentImage')})")

    if not needs_promotion(recipe, target_image):
        print(f"Parent image already {target_image}; nothing to do.")
        return PromotionResult(recipe_arn=recipe_arn, promoted=False)

    new_version = next_recipe_version(recipe)
    # Device mappings and components are copied from the current recipe as-is.
    new_recipe_arn = image_builder.create_image_recipe(
        name=recipe["name"],
        semantic_version=new_version,
        parent_image=target_image,
        components=recipe.get("components") or [],
        block_device_mappings=recipe.get("blockDeviceMappings"),
    )
    print(f"Created image recipe: {new_recipe_arn}")

    # From here on a failure leaves the new recipe without a pipeline.
    try:
        pipeline = resolve_pipeline(image_builder, filters)
        pipeline_update = image_builder.update_image_pipeline(
            image_pipeline_arn=pipeline.get("arn"),
            image_recipe_arn=new_recipe_arn,
            infrastructure_configuration_arn=pipeline.get("infrastructureConfigurationArn"),
        )
    except ImageBuilderToolError as exc:
        raise PromotionIncompleteError(
            f"Created {new_recipe_arn} but failed to repoint the pipeline: {exc}",
            orphaned_recipe_arn=new_recipe_arn,
        ) from exc

    return PromotionResult(
        recipe_arn=recipe_arn,
        promoted=True,
        new_recipe_arn=new_recipe_arn,
        new_version=new_version,
        pipeline_update=pipeline_update,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imagebuilder-tools promote-recipe",
        description="Create a new recipe version on a new base AMI and repoint its pipeline.",
    )
    parser.add_argument("name", help="Image recipe and pipeline name.")
    parser.add_argument(
        "-a",
        "--ami-id",
        required=True,
        metavar="AMI_ID",
        help="Base image the recipe should be built from.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    # Parse first so usage errors never reach AWS.
    args = build_parser().parse_args(argv)
    result = promote(ImageBuilder.from_environment(), name_filter(args.name), args.ami_id)

    write_github_outputs(
        {
            "promoted": "true" if result.promoted else "false",
            "image_recipe_arn": result.new_recipe_arn or result.recipe_arn,
        }
    )
    if result.promoted:
        print(json.dumps(result.pipeline_update, indent=2, default=str))


if __name__ == "__main__":
    main()
