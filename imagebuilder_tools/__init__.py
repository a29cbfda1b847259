"""
Script: imagebuilder_tools package
What: Holds Python helpers that keep EC2 Image Builder recipes and pipelines current.
Doing: Groups CLI entrypoints, the version/pagination logic, and the boto3 adapter in one importable package.
Why: Keeps base-image promotion logic readable and testable instead of hiding it in console clicks.
Goal: Provide a clear, maintainable home for recipe resolution and promotion logic.
"""
