#!/usr/bin/env python3
"""Example: Quickstart for path-owners

Minimal working example: build packages from owners.search records,
resolve which packages own a set of paths, and render the result as a
grouped text report and as JSON.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install path-owners
"""
from __future__ import annotations

from rich.console import Console

import pathowners
from pathowners.render import ListingPolicy
from pathowners.resolver import LinkSettings

REPOSITORY = "PHID-REPO-example"

RECORDS = [
    {
        "id": 1,
        "fields": {"name": "Core Libraries", "dominion": {"value": "strong"}},
        "attachments": {"paths": {"paths": [
            {"repositoryPHID": REPOSITORY, "path": "/lib/", "excluded": False},
        ]}},
    },
    {
        "id": 2,
        "fields": {"name": "Go Reviewers", "dominion": {"value": "weak"}},
        "attachments": {"paths": {"paths": [
            {"repositoryPHID": REPOSITORY, "path": "/lib/x.go", "excluded": False},
            {"repositoryPHID": REPOSITORY, "path": "/lib/x_test.go", "excluded": True},
        ]}},
    },
]

PATHS = ["lib/x.go", "lib/x_test.go", "lib/y.go", "README.md"]


def main() -> None:
    console = Console()
    print(f"path-owners version: {pathowners.__version__}")

    # Step 1: Convert remote records into typed packages
    packages = [pathowners.Package.from_record(r) for r in RECORDS]

    # Step 2: Resolve ownership for every candidate path
    settings = LinkSettings(base_uri="https://phabricator.example.com")
    index = pathowners.resolve(PATHS, packages, REPOSITORY, settings)
    print(f"Owned: {index.owned_paths()}, unowned: {index.unowned_paths()}")

    # Step 3: Grouped report, strong owners only
    console.print(pathowners.render(index, "text"))

    # Step 4: Grouped report listing every owner with its dominion
    console.print(pathowners.render(index, "text", policy=ListingPolicy.FULL))

    # Step 5: Machine-readable output
    print(pathowners.render(index, "json"))


if __name__ == "__main__":
    main()
