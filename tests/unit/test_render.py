"""Unit tests for pathowners.render: text, JSON and YAML output."""
from __future__ import annotations

import json

import pytest
import yaml
from rich.console import Console

from pathowners.errors import ConfigurationError
from pathowners.models import Package
from pathowners.render import (
    ListingPolicy,
    OutputFormat,
    PlainLinker,
    TerminalLinker,
    TextRenderer,
    linker_for,
    render,
    to_mapping,
)
from pathowners.render.text import NO_OWNERS
from pathowners.resolver import LinkSettings, OwnershipIndex, resolve

REPO = "PHID-REPO-main"


@pytest.fixture()
def index(package_record) -> OwnershipIndex:
    packages = [
        Package.from_record(
            package_record(1, "Core", "strong", include=("/lib/",), slack="#core")
        ),
        Package.from_record(
            package_record(
                2, "Fallback", "weak", include=("/lib/x.go",), exclude=("/lib/x_test.go",)
            )
        ),
        Package.from_record(package_record(3, "Docs", "weak", include=("/docs/",))),
    ]
    settings = LinkSettings(
        base_uri="https://phab.example.com",
        slack_uri="https://chat.example.com",
        slack_field="slack",
    )
    return resolve(
        ["lib/x.go", "lib/x_test.go", "lib/y.go", "docs/a.md", "README"],
        packages,
        REPO,
        settings,
    )


class TestOutputFormat:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", OutputFormat.TEXT),
            ("json", OutputFormat.JSON),
            ("structured", OutputFormat.JSON),
            ("YAML", OutputFormat.YAML),
        ],
    )
    def test_parse(self, value: str, expected: OutputFormat) -> None:
        assert OutputFormat.parse(value) is expected

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigurationError, match="xml"):
            OutputFormat.parse("xml")

    def test_render_rejects_unknown_mode(self, index) -> None:
        with pytest.raises(ConfigurationError):
            render(index, "html")


class TestTextRenderer:
    def test_strong_priority_report(self, index) -> None:
        text = TextRenderer(show_channels=False).render(index).plain
        assert text.splitlines() == [
            "README",
            "  " + NO_OWNERS,
            "docs/a.md",
            "  Docs",
            "lib/x.go",
            "  Core",
            "lib/x_test.go",
            "lib/y.go",
            "  Core",
        ]

    def test_full_listing_labels_dominion(self, index) -> None:
        text = TextRenderer(ListingPolicy.FULL, show_channels=False).render(index).plain
        lines = text.splitlines()
        start = lines.index("lib/x.go")
        assert lines[start + 1 : start + 3] == ["  Strong: Core", "  Weak: Fallback"]

    def test_channel_suffix(self, index) -> None:
        text = TextRenderer().render(index).plain
        assert "  Core (Slack: #core)" in text.splitlines()

    def test_headers_are_bold(self, index) -> None:
        report = TextRenderer().render(index)
        bold = [
            report.plain[span.start : span.end]
            for span in report.spans
            if str(span.style) == "bold"
        ]
        assert "lib/x.go" in bold

    def test_empty_index(self) -> None:
        assert TextRenderer().render(OwnershipIndex({})).plain == ""

    def test_terminal_links(self, index) -> None:
        report = TextRenderer(linker=TerminalLinker()).render(index)
        console = Console(force_terminal=True, color_system="truecolor", width=200)
        with console.capture() as capture:
            console.print(report)
        output = capture.get()
        assert "\x1b]8;" in output
        assert "https://phab.example.com/owners/package/1/" in output

    def test_plain_links(self, index) -> None:
        report = TextRenderer(linker=PlainLinker()).render(index)
        console = Console(force_terminal=True, color_system="truecolor", width=200)
        with console.capture() as capture:
            console.print(report)
        assert "\x1b]8;" not in capture.get()


class TestLinker:
    def test_no_url_degrades_to_label(self) -> None:
        text = TerminalLinker().link("Core", None)
        assert text.plain == "Core"
        assert not text.spans and text.style == ""

    def test_linker_for(self) -> None:
        assert isinstance(linker_for(True), TerminalLinker)
        assert isinstance(linker_for(False), PlainLinker)


class TestStructured:
    def test_mapping_keeps_every_path_sorted(self, index) -> None:
        mapping = to_mapping(index)
        assert list(mapping) == ["README", "docs/a.md", "lib/x.go", "lib/x_test.go", "lib/y.go"]
        assert mapping["README"] == []

    def test_no_grouping_or_filtering(self, index) -> None:
        mapping = to_mapping(index)
        assert [r["name"] for r in mapping["lib/x.go"]] == ["Core", "Fallback"]

    def test_json(self, index) -> None:
        data = json.loads(render(index, "json"))
        assert list(data) == list(to_mapping(index))
        core = data["lib/y.go"][0]
        assert core["dominion"] == {"value": "strong"}
        assert core["url"] == "https://phab.example.com/owners/package/1/"
        assert core["slack"] == {
            "channel_name": "core",
            "channel_uri": "https://chat.example.com/channels/core/",
        }

    def test_structured_alias(self, index) -> None:
        assert render(index, "structured") == render(index, "json")

    def test_yaml(self, index) -> None:
        data = yaml.safe_load(render(index, "yaml"))
        assert data == to_mapping(index)
