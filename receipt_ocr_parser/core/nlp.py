"""
Pluggable natural-language helpers used as fallbacks by the parsers.

The parsers only depend on the two small protocols below, so tests can
pass stubs and callers can swap in any compatible implementation.
"""

from typing import Dict, List, Optional, Protocol


class DateDetector(Protocol):
    """Finds date-like spans in free text."""

    def find_dates(self, text: str) -> List[str]:
        """Return matched substrings in the order they appear."""


class OrganizationRecognizer(Protocol):
    """Finds organization names in free text."""

    def find_organizations(self, text: str) -> List[str]:
        """Return organization name spans in the order they appear."""


class DateparserDetector:
    """DateDetector backed by dateparser's free-text search."""

    def __init__(self, languages: Optional[List[str]] = None,
                 settings: Optional[Dict] = None):
        self.languages = languages or ["en"]
        # Bare numbers and weekday names are not receipt dates
        self.settings = settings or {"REQUIRE_PARTS": ["day", "month", "year"]}

    def find_dates(self, text: str) -> List[str]:
        if not text.strip():
            return []
        from dateparser.search import search_dates
        found = search_dates(text, languages=self.languages, settings=self.settings)
        return [span for span, _ in found or []]


# Loaded spaCy pipelines, keyed by model name
_nlp_models = {}


def _get_spacy_model(model: str):
    """Get or load a spaCy pipeline (lazy initialization)."""
    if model not in _nlp_models:
        import spacy
        _nlp_models[model] = spacy.load(model)
    return _nlp_models[model]


class SpacyOrganizationRecognizer:
    """OrganizationRecognizer returning spaCy ORG entities."""

    def __init__(self, model: str = "en_core_web_sm"):
        self.model = model

    def find_organizations(self, text: str) -> List[str]:
        if not text.strip():
            return []
        doc = _get_spacy_model(self.model)(text)
        return [ent.text.strip() for ent in doc.ents if ent.label_ == "ORG"]
