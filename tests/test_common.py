"""
Script: tests/test_common.py
What: Tests for shared helpers in `imagebuilder_tools/common.py`.
Doing: Checks env reads, region fallback order, step-output writes, and the orphaned-recipe error.
Why: Every command relies on these helpers.
Goal: Keep configuration and error reporting consistent.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from imagebuilder_tools.common import (
    ImageBuilderToolError,
    PromotionIncompleteError,
    RemoteError,
    optional_env,
    require_env,
    resolve_region,
    write_github_outputs,
)


class EnvTests(unittest.TestCase):
    def test_require_env_rejects_missing_and_empty(self) -> None:
        with mock.patch.dict(os.environ, {"EMPTY_VALUE": ""}, clear=True):
            with self.assertRaises(ImageBuilderToolError):
                require_env("EMPTY_VALUE")
            with self.assertRaises(ImageBuilderToolError):
                require_env("NOT_SET")
            self.assertEqual(optional_env("NOT_SET", "fallback"), "fallback")

    def test_region_prefers_aws_region(self) -> None:
        env = {"AWS_REGION": "eu-west-1", "AWS_DEFAULT_REGION": "us-west-2"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual(resolve_region("ap-south-1"), "eu-west-1")

    def test_region_falls_back_to_session_then_default(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_region("ap-south-1"), "ap-south-1")
            self.assertEqual(resolve_region(None), "us-east-1")


class GithubOutputTests(unittest.TestCase):
    def test_appends_key_value_lines(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            output = Path(tmp) / "out"
            output.write_text("existing=1\n", encoding="utf-8")
            with mock.patch.dict(os.environ, {"GITHUB_OUTPUT": str(output)}):
                write_github_outputs({"promoted": "true", "image_recipe_arn": "r/1.0.1"})
            self.assertEqual(
                output.read_text(encoding="utf-8"),
                "existing=1\npromoted=true\nimage_recipe_arn=r/1.0.1\n",
            )

    def test_no_output_file_is_a_no_op(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            write_github_outputs({"promoted": "false"})


class PromotionIncompleteErrorTests(unittest.TestCase):
    def test_keeps_orphaned_arn(self) -> None:
        exc = PromotionIncompleteError("update failed", orphaned_recipe_arn="r/1.3.1")
        self.assertIsInstance(exc, RemoteError)
        self.assertEqual(exc.orphaned_recipe_arn, "r/1.3.1")
        self.assertIn("Orphaned image recipe: r/1.3.1", str(exc))


if __name__ == "__main__":
    unittest.main()
