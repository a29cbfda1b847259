"""
Script: imagebuilder_tools/imagebuilder.py
What: Thin wrapper around the boto3 EC2 Image Builder client.
Doing: Exposes the five calls promotion needs, builds the name filter, and turns botocore failures into `RemoteError`.
Why: Keeps AWS request/response shapes out of the selection and promotion logic.
Goal: One place that knows how Image Builder is called.
"""

from __future__ import annotations

from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from imagebuilder_tools.common import RemoteError, resolve_region


Filter = dict[str, Any]


def name_filter(name: str) -> list[Filter]:
    """
    Build the `filters` argument that scopes a list call to one name.

    Image Builder matches the name across all versions, so the same filter
    serves both the recipe and the pipeline listing.
    """
    return [{"name": "name", "values": [name]}]


def _strip_metadata(response: dict) -> dict:
    return {key: value for key, value in response.items() if key != "ResponseMetadata"}


class ImageBuilder:
    """Image Builder operations used by recipe resolution and promotion."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_environment(cls) -> "ImageBuilder":
        """Create a client using the default boto3 credential chain."""
        session = boto3.session.Session()
        region = resolve_region(session.region_name)
        return cls(session.client("imagebuilder", region_name=region))

    def _call(self, operation: str, **kwargs: Any) -> dict:
        # Single attempt per call. Any failure aborts the run.
        try:
            return getattr(self._client, operation)(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise RemoteError(f"Image Builder {operation} failed: {exc}") from exc

    def list_image_recipes(
        self, filters: list[Filter], next_token: Optional[str] = None
    ) -> tuple[list[dict], Optional[str]]:
        """Return one page of recipe summaries and the token for the next page."""
        kwargs: dict[str, Any] = {"filters": filters}
        if next_token:
            kwargs["nextToken"] = next_token
        response = self._call("list_image_recipes", **kwargs)
        return list(response.get("imageRecipeSummaryList") or []), response.get("nextToken")

    def get_image_recipe(self, image_recipe_arn: str) -> dict:
        response = self._call("get_image_recipe", imageRecipeArn=image_recipe_arn)
        recipe = response.get("imageRecipe")
        if not recipe:
            raise RemoteError(f"Image Builder returned no recipe for {image_recipe_arn}")
        return recipe

    def list_image_pipelines(self, filters: list[Filter]) -> list[dict]:
        """Return the first page of pipelines; only one match per name is expected."""
        response = self._call("list_image_pipelines", filters=filters)
        return list(response.get("imagePipelineList") or [])

    def create_image_recipe(
        self,
        *,
        name: str,
        semantic_version: str,
        parent_image: str,
        components: list[dict],
        block_device_mappings: Optional[list[dict]] = None,
    ) -> str:
        """Create one recipe version and return its ARN."""
        kwargs: dict[str, Any] = {
            "name": name,
            "semanticVersion": semantic_version,
            "parentImage": parent_image,
            "components": components,
        }
        if block_device_mappings is not None:
            kwargs["blockDeviceMappings"] = block_device_mappings
        response = self._call("create_image_recipe", **kwargs)
        recipe_arn = str(response.get("imageRecipeArn") or "")
        if not recipe_arn:
            raise RemoteError(f"Image Builder did not return an ARN for new recipe {name} {semantic_version}")
        return recipe_arn

    def update_image_pipeline(
        self,
        *,
        image_pipeline_arn: str,
        image_recipe_arn: str,
        infrastructure_configuration_arn: str,
    ) -> dict:
        """Point a pipeline at a recipe, re-sending its infrastructure configuration."""
        response = self._call(
            "update_image_pipeline",
            imagePipelineArn=image_pipeline_arn,
            imageRecipeArn=image_recipe_arn,
            infrastructureConfigurationArn=infrastructure_configuration_arn,
        )
        return _strip_metadata(response)
