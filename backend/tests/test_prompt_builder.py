"""Tests for enrichment and pairing prompts."""

from app.models.enums import WineType
from app.services.prompt_builder import (
    as_messages,
    build_enrichment_prompt,
    build_pairing_prompt,
    format_candidate_listing,
)
from conftest import make_wine


class TestEnrichmentPrompt:
    def test_contains_input_and_schema(self):
        prompt = build_enrichment_prompt("Tignanello", 2019, "Sangiovese")

        assert "Name: Tignanello" in prompt
        assert "Year: 2019" in prompt
        assert "Grapes: Sangiovese" in prompt
        for key in ("grapes", "country", "region", "type", "bestBefore",
                    "tasteProfile", "pairingAdvice"):
            assert f'"{key}"' in prompt

    def test_lists_every_legal_type(self):
        prompt = build_enrichment_prompt("Tignanello", 2019)

        for wine_type in WineType:
            assert f'"{wine_type.value}"' in prompt

    def test_grapes_line_omitted_when_blank(self):
        assert "Grapes:" not in build_enrichment_prompt("Tignanello", 2019)
        assert "Grapes:" not in build_enrichment_prompt("Tignanello", 2019, "  ")

    def test_deterministic(self):
        assert build_enrichment_prompt("A", 2000, "B") == build_enrichment_prompt("A", 2000, "B")


class TestCandidateListing:
    def test_numbered_from_one_in_order(self):
        listing = format_candidate_listing([
            make_wine(name="Barolo", year=2016, country="Italy", region="Piedmont",
                      taste_profile="Tar and roses"),
            make_wine(name="Sancerre", year=2022, wine_type=WineType.WHITE,
                      country="France", region="Loire", taste_profile="Flint"),
        ])

        assert listing.splitlines() == [
            "1. Barolo (2016) - red - Italy, Piedmont - Taste: Tar and roses",
            "2. Sancerre (2022) - white - France, Loire - Taste: Flint",
        ]

    def test_missing_fields_read_unknown(self):
        listing = format_candidate_listing([
            make_wine(name="Mystery", year=2020, country=None, region=None, taste_profile=None),
        ])

        assert listing == "1. Mystery (2020) - red - unknown, unknown - Taste: unknown"

    def test_empty(self):
        assert format_candidate_listing([]) == ""


class TestPairingPrompt:
    def test_contains_dish_listing_and_cap(self):
        prompt = build_pairing_prompt("Mushroom risotto", [make_wine(name="Barolo")])

        assert "DISH: Mushroom risotto" in prompt
        assert "1. Barolo (2018)" in prompt
        assert "at most 3 recommendations" in prompt
        assert '"wineIndex"' in prompt
        assert '"generalAdvice"' in prompt

    def test_deterministic(self):
        wines = [make_wine(name="Barolo"), make_wine(name="Cava")]
        assert build_pairing_prompt("Fish", wines) == build_pairing_prompt("Fish", wines)


def test_as_messages():
    assert as_messages("hi") == [{"role": "user", "content": "hi"}]
