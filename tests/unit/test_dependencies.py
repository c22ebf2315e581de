"""Tests for canonical id parsing and dependency list construction."""

from __future__ import annotations

import pytest

from modctx.dependencies import CanonicalId, build_dependency_list, parse_canonical_id
from modctx.errors import ParseError
from modctx.types import ModuleData, ModuleVersion


class TestParseCanonicalId:
    def test_full_id(self):
        parsed = parse_canonical_id("powershellget:Az.Accounts/[2.2.3]#PSGallery")
        assert parsed == CanonicalId(
            provider="powershellget",
            name="Az.Accounts",
            version="2.2.3",
            source="PSGallery",
        )

    def test_without_source(self):
        parsed = parse_canonical_id("powershellget:Pester/5.5.0")
        assert parsed.name == "Pester"
        assert parsed.version == "5.5.0"
        assert parsed.source is None

    def test_range_takes_first_bound(self):
        parsed = parse_canonical_id("powershellget:Az.Storage/[5.0.0,6.0.0)#PSGallery")
        assert parsed.version == "5.0.0"

    def test_open_lower_bound_takes_upper(self):
        parsed = parse_canonical_id("powershellget:Az.Storage/(,6.0.0]#PSGallery")
        assert parsed.version == "6.0.0"

    @pytest.mark.parametrize(
        "value",
        [
            "Az.Accounts",
            "powershellget:Az.Accounts",
            "powershellget:/[1.0.0]#PSGallery",
            "powershellget:Az.Accounts/#PSGallery",
            "powershellget:Az.Accounts/[]#PSGallery",
            "",
        ],
    )
    def test_malformed_ids_raise(self, value):
        with pytest.raises(ParseError) as exc_info:
            parse_canonical_id(value)
        assert repr(value) in str(exc_info.value)


class TestBuildDependencyList:
    def test_root_first_then_dependencies_in_order(self):
        data = ModuleData(
            name="Az.Storage",
            version="5.1.0",
            dependencies=[
                "powershellget:Az.Accounts/[2.2.3]#PSGallery",
                "powershellget:Az.Resources/[6.0.0]#PSGallery",
            ],
        )
        assert build_dependency_list(data) == [
            ModuleVersion("Az.Storage", "5.1.0"),
            ModuleVersion("Az.Accounts", "2.2.3"),
            ModuleVersion("Az.Resources", "6.0.0"),
        ]

    def test_no_dependencies(self):
        data = ModuleData(name="Pester", version="5.5.0")
        assert build_dependency_list(data) == [ModuleVersion("Pester", "5.5.0")]

    def test_malformed_dependency_raises(self):
        data = ModuleData(name="Root", version="1.0.0", dependencies=["garbage"])
        with pytest.raises(ParseError):
            build_dependency_list(data)
