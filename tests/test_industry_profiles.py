"""
Tests for IndustryProfileRegistry.

Tests cover:
- Registry contents: all fifteen industries, unique names
- Lookup: exact, case-sensitive matching
- Fallback: unknown, empty and missing names resolve to the generic profile
- Profile attributes: multipliers, persistence, pathway helpers
"""

import pytest

from models.industry_profiles import (
    GENERIC_INDUSTRY,
    INDUSTRY_PROFILES,
    IndustryProfileRegistry,
    get_industry_profile,
    registry,
)
from models.records import Pathway, PersistenceType, TrackedPollutant


class TestIndustryProfileRegistry:
    """Test suite for the industry profile registry."""

    # ==================== Contents ====================

    def test_registry_has_fifteen_profiles(self):
        """The table covers the generic zone plus fourteen sectors."""
        assert len(registry) == 15
        assert len(registry.names()) == len(set(registry.names()))

    def test_registry_iterates_profiles_in_table_order(self):
        """Iteration yields profiles in their declared order."""
        assert [p.name for p in registry] == [p.name for p in INDUSTRY_PROFILES]

    def test_every_profile_has_primary_pollutants_and_pathways(self):
        """Every profile has at least one pollutant and one pathway."""
        for profile in registry:
            assert profile.primary_pollutants
            assert profile.main_pathways
            assert profile.vulnerability_multiplier > 0

    # ==================== Lookup ====================

    def test_exact_lookup(self):
        """Known names return their own profile."""
        profile = registry.lookup("Thermal Power Plant")
        assert profile.name == "Thermal Power Plant"
        assert profile.persistence_type == PersistenceType.MEDIUM_TO_LONG

    def test_lookup_is_case_sensitive(self):
        """A name differing only in case is unknown."""
        assert registry.lookup("mining") is registry.default
        assert "mining" not in registry
        assert "Mining" in registry

    @pytest.mark.parametrize("name", ["Space Tourism", "", None, "Mining "])
    def test_unknown_names_fall_back_to_generic(self, name):
        """Unknown, empty or missing names resolve to the identical generic profile."""
        assert registry.lookup(name) is registry.default
        assert registry.lookup(name).name == GENERIC_INDUSTRY

    def test_module_level_lookup(self):
        """get_industry_profile delegates to the shared registry."""
        assert get_industry_profile("Mining") is registry.lookup("Mining")
        assert get_industry_profile("unknown") is registry.default

    def test_registry_requires_generic_profile(self):
        """A registry without the generic profile is rejected."""
        sectors = [p for p in INDUSTRY_PROFILES if p.name != GENERIC_INDUSTRY]
        with pytest.raises(ValueError):
            IndustryProfileRegistry(sectors)

    # ==================== Attributes ====================

    @pytest.mark.parametrize("name,multiplier", [
        ("Mining", 1.25),
        ("Oil Drilling", 1.25),
        ("Steel & Metallurgy", 1.15),
        ("Automobile Manufacturing", 1.05),
        ("Fishing", 0.9),
        ("Food Processing", 0.9),
        ("Forestry", 0.85),
        (GENERIC_INDUSTRY, 1.0),
    ])
    def test_vulnerability_multipliers(self, name, multiplier):
        """Sector multipliers scale the forecast score."""
        assert registry.lookup(name).vulnerability_multiplier == multiplier

    def test_emits_matches_tracked_pollutants(self):
        """emits() matches on the pollutant display name."""
        thermal = registry.lookup("Thermal Power Plant")
        assert thermal.emits(TrackedPollutant.PM25)
        assert thermal.emits(TrackedPollutant.NOX)
        assert not thermal.emits(TrackedPollutant.VOCS)

    def test_has_pathway(self):
        fishing = registry.lookup("Fishing")
        assert fishing.has_pathway(Pathway.WATER)
        assert not fishing.has_pathway(Pathway.AIR)

    def test_profile_serializes_with_camel_case_keys(self):
        """Profiles are echoed to clients with camelCase keys."""
        data = registry.lookup("Mining").to_dict()
        assert data["persistenceType"] == "Very Long"
        assert data["mainPathways"] == ["Soil", "Water", "Air"]
        assert data["vulnerabilityMultiplier"] == 1.25
