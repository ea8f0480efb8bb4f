"""Unit tests for pathowners.resolver: OwnershipIndex construction."""
from __future__ import annotations

import pytest

from pathowners.models import Package
from pathowners.resolver import (
    Channel,
    LinkSettings,
    OwnershipIndex,
    decorate,
    normalize_path,
    package_channel,
    package_url,
    resolve,
)

REPO = "PHID-REPO-main"


@pytest.fixture()
def example_packages(package_record) -> list[Package]:
    return [
        Package.from_record(package_record(1, "A", "strong", include=("/lib/",))),
        Package.from_record(
            package_record(
                2, "B", "weak", include=("/lib/x.go",), exclude=("/lib/x_test.go",)
            )
        ),
    ]


def _names(index: OwnershipIndex, path: str) -> list[str]:
    return [p.name for p in index[path]]


class TestResolve:
    def test_worked_example(self, example_packages) -> None:
        index = resolve(["lib/x.go", "lib/x_test.go", "lib/y.go"], example_packages, REPO)
        assert _names(index, "lib/x.go") == ["A", "B"]
        assert _names(index, "lib/x_test.go") == ["A"]
        assert _names(index, "lib/y.go") == ["A"]

    def test_every_candidate_is_a_key(self, example_packages) -> None:
        index = resolve(["docs/readme.md", "lib/y.go"], example_packages, REPO)
        assert list(index) == ["docs/readme.md", "lib/y.go"]
        assert index["docs/readme.md"] == ()
        assert index.unowned_paths() == ["docs/readme.md"]
        assert index.owned_paths() == ["lib/y.go"]

    def test_keys_are_sorted(self, example_packages) -> None:
        index = resolve(["lib/z", "a", "lib/a"], example_packages, REPO)
        assert list(index) == ["a", "lib/a", "lib/z"]

    def test_paths_are_normalized_and_deduplicated(self, example_packages) -> None:
        index = resolve(["/lib/y.go/", "lib/y.go"], example_packages, REPO)
        assert list(index) == ["lib/y.go"]

    def test_query_order_is_kept(self, package_record) -> None:
        packages = [
            Package.from_record(package_record(3, "Zulu", "weak", include=("/",))),
            Package.from_record(package_record(4, "Alpha", "strong", include=("/",))),
        ]
        index = resolve(["x"], packages, REPO)
        assert _names(index, "x") == ["Zulu", "Alpha"]

    def test_foreign_repository_specs_never_apply(self, package_record) -> None:
        foreign = package_record(5, "Foreign", include=("/",), repository="PHID-REPO-other")
        record = package_record(6, "Local", include=("/lib/",))
        record["attachments"]["paths"]["paths"].append(
            {"repositoryPHID": "PHID-REPO-other", "path": "/lib/", "excluded": True}
        )
        packages = [Package.from_record(foreign), Package.from_record(record)]
        index = resolve(["lib/x"], packages, REPO)
        assert _names(index, "lib/x") == ["Local"]

    def test_idempotent(self, example_packages) -> None:
        paths = ["lib/x.go", "lib/x_test.go", "docs/a"]
        assert resolve(paths, example_packages, REPO) == resolve(
            paths, example_packages, REPO
        )

    def test_empty_input(self, example_packages) -> None:
        index = resolve([], example_packages, REPO)
        assert len(index) == 0

    def test_index_is_read_only(self, example_packages) -> None:
        index = resolve(["lib/x.go"], example_packages, REPO)
        with pytest.raises(TypeError):
            index["lib/x.go"] = ()  # type: ignore[index]


class TestNormalizePath:
    def test_strips_slashes(self) -> None:
        assert normalize_path("/a/b/") == "a/b"


class TestDecoration:
    def test_url_requires_base(self, example_packages) -> None:
        assert package_url(None, example_packages[0]) is None
        assert (
            package_url("https://phab.example.com/", example_packages[0])
            == "https://phab.example.com/owners/package/1/"
        )

    def test_channel_absent_without_field(self, example_packages) -> None:
        assert package_channel(LinkSettings(), example_packages[0]) is None

    def test_channel_name_is_cleaned(self, package_record) -> None:
        package = Package.from_record(package_record(1, "A", slack=" #core-libs "))
        channel = package_channel(LinkSettings(slack_field="slack"), package)
        assert channel == Channel(name="core-libs")

    def test_channel_uri(self, package_record) -> None:
        package = Package.from_record(package_record(1, "A", slack="core"))
        settings = LinkSettings(slack_uri="https://chat.example.com", slack_field="slack")
        channel = package_channel(settings, package)
        assert channel is not None
        assert channel.uri == "https://chat.example.com/channels/core/"

    def test_missing_channel_value(self, package_record) -> None:
        package = Package.from_record(package_record(1, "A"))
        settings = LinkSettings(slack_uri="https://chat.example.com", slack_field="slack")
        assert package_channel(settings, package) == Channel(name=None, uri=None)

    def test_channel_value_trimmed_to_nothing(self, package_record) -> None:
        package = Package.from_record(package_record(1, "A", slack=" # "))
        settings = LinkSettings(slack_uri="https://chat.example.com", slack_field="slack")
        record = decorate(package, settings).to_record()
        assert record["slack"] == {"channel_name": "", "channel_uri": None}

    def test_record_includes_links(self, package_record) -> None:
        package = Package.from_record(package_record(1, "A", slack="core"))
        settings = LinkSettings(
            base_uri="https://phab.example.com",
            slack_uri="https://chat.example.com",
            slack_field="slack",
        )
        record = decorate(package, settings).to_record()
        assert record["name"] == "A"
        assert record["url"] == "https://phab.example.com/owners/package/1/"
        assert record["slack"] == {
            "channel_name": "core",
            "channel_uri": "https://chat.example.com/channels/core/",
        }

    def test_record_without_slack_uri_omits_channel_uri(self, package_record) -> None:
        package = Package.from_record(package_record(1, "A", slack="core"))
        record = decorate(package, LinkSettings(slack_field="slack")).to_record()
        assert record["slack"] == {"channel_name": "core"}
        assert "url" not in record

    def test_decoration_passes_through_resolve(self, package_record) -> None:
        package = Package.from_record(package_record(7, "A", include=("/",)))
        index = resolve(["x"], [package], REPO, LinkSettings(base_uri="https://p"))
        assert index["x"][0].url == "https://p/owners/package/7/"
