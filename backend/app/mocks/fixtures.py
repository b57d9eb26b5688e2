"""
Mock completion fixtures for development and testing.

Scenarios:
- enrichment: well-formed answer wrapped in prose
- enrichment_bad_type: answer with an illegal wine type
- pairing: two valid recommendations and one out-of-range index
- no_json: prose only
"""

MOCK_ENRICHMENT_RESPONSE = """Here is the information you asked for:
{
  "grapes": "Cabernet Sauvignon, Merlot",
  "country": "France",
  "region": "Pauillac, Bordeaux",
  "type": "red",
  "bestBefore": "2026-2040",
  "tasteProfile": "Blackcurrant, cedar and graphite with firm, fine-grained tannins.",
  "pairingAdvice": "Roast lamb, entrecote, aged Comté."
}"""

MOCK_ENRICHMENT_BAD_TYPE_RESPONSE = (
    'Sure! {"grapes":"Merlot","country":"France","region":"Bordeaux","type":"purple",'
    '"bestBefore":"2025-2030","tasteProfile":"x","pairingAdvice":"y"} Hope that helps!'
)

MOCK_PAIRING_RESPONSE = """```json
{
  "recommendations": [
    {"wineIndex": 1, "reason": "Tannins stand up to the richness of the meat.", "score": 92},
    {"wineIndex": 2, "reason": "Fresh acidity cuts through the sauce.", "score": 71},
    {"wineIndex": 7, "reason": "Not in the listing.", "score": 60}
  ],
  "generalAdvice": "Choose a structured red for red meat dishes."
}
```"""

MOCK_NO_JSON_RESPONSE = "I'm sorry, I can't help with that wine."

MOCK_SCENARIOS: dict[str, str] = {
    "enrichment": MOCK_ENRICHMENT_RESPONSE,
    "enrichment_bad_type": MOCK_ENRICHMENT_BAD_TYPE_RESPONSE,
    "pairing": MOCK_PAIRING_RESPONSE,
    "no_json": MOCK_NO_JSON_RESPONSE,
}


def get_mock_response(scenario: str = "enrichment") -> str:
    """
    Get a raw completion text for the given scenario.

    Args:
        scenario: One of enrichment, enrichment_bad_type, pairing, no_json

    Returns:
        Raw model output as the completion API would return it
    """
    if scenario not in MOCK_SCENARIOS:
        scenario = "enrichment"
    return MOCK_SCENARIOS[scenario]
