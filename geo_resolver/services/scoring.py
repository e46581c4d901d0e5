"""Candidate scoring and ranking for geocoding results"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from geo_resolver.providers.base import GeocodeQuery, ProviderSource, RawCandidate
from geo_resolver.providers.gazetteer import province_names
from geo_resolver.text import clean_company_name, mentions, mentions_house_number


class MatchLevel(str, Enum):
    """How much of the input address a candidate actually matched"""
    EXACT = "exact"
    FULL_ADDRESS = "full_address"
    DISTRICT_PROVINCE = "district_province"
    PROVINCE_ONLY = "province_only"
    PARTIAL = "partial"


DEFAULT_LEVEL_WEIGHTS: Dict[MatchLevel, float] = {
    MatchLevel.EXACT: 1.0,
    MatchLevel.FULL_ADDRESS: 0.8,
    MatchLevel.DISTRICT_PROVINCE: 0.5,
    MatchLevel.PROVINCE_ONLY: 0.3,
    MatchLevel.PARTIAL: 0.1,
}

DEFAULT_TRUST_WEIGHTS: Dict[str, float] = {
    ProviderSource.PRIMARY.value: 1.0,
    ProviderSource.SECONDARY.value: 0.6,
    ProviderSource.MATHEMATICAL.value: 0.1,
}

PRIORITY = [source.value for source in ProviderSource]

# Used when a provider reports no certainty of its own
NEUTRAL_SIGNAL = 0.5
PARTIAL_MATCH_FACTOR = 0.8


@dataclass
class ScoredCandidate:
    raw: RawCandidate
    source: ProviderSource
    match_level: MatchLevel
    confidence: float
    final_score: float


class ScoringEngine:
    """
    Assigns match level, confidence and a rank key to provider candidates

    ``final_score = trust[source] * (confidence_weight * confidence
    + match_weight * level_weight[match_level]) + completeness_bonus``,
    the bonus applying when the candidate resolved both a road and a
    district. Every weight is tunable.
    """

    def __init__(
        self,
        trust_weights: Optional[Dict[str, float]] = None,
        confidence_weight: float = 0.4,
        match_weight: float = 0.6,
        completeness_bonus: float = 0.05,
        ambiguity_penalty: float = 0.1,
        level_weights: Optional[Dict[MatchLevel, float]] = None,
    ):
        self.trust_weights = dict(trust_weights or DEFAULT_TRUST_WEIGHTS)
        self.confidence_weight = confidence_weight
        self.match_weight = match_weight
        self.completeness_bonus = completeness_bonus
        self.ambiguity_penalty = ambiguity_penalty
        self.level_weights = dict(level_weights or DEFAULT_LEVEL_WEIGHTS)

    @classmethod
    def from_settings(cls, settings) -> "ScoringEngine":
        return cls(
            trust_weights=settings.get_trust_weights(),
            confidence_weight=settings.score_confidence_weight,
            match_weight=settings.score_match_weight,
            completeness_bonus=settings.score_completeness_bonus,
            ambiguity_penalty=settings.score_ambiguity_penalty,
        )

    def match_level(self, query: GeocodeQuery, candidate: RawCandidate) -> MatchLevel:
        """Compare the components a provider resolved with the query text

        Province names are compared in every spelling the gazetteer knows,
        so Thai components still match a Latin-script query. A matching
        house number together with the postcode stands in for a district
        name written in the other script.
        """
        text = query.address
        parts = candidate.components

        company = clean_company_name(query.company_name)
        if company and mentions(candidate.formatted_address, company):
            return MatchLevel.EXACT

        house = mentions_house_number(text, parts.house_number)
        postcode = mentions(text, parts.postcode)
        province = postcode or any(mentions(text, name) for name in province_names(parts.state))
        district = (
            mentions(text, parts.district)
            or mentions(text, parts.city)
            or (house and postcode)
        )
        if not province:
            return MatchLevel.PARTIAL
        if not district:
            return MatchLevel.PROVINCE_ONLY

        road = mentions(text, parts.road)
        if house and (road or not parts.road):
            return MatchLevel.EXACT
        if road or mentions(text, parts.subdistrict):
            return MatchLevel.FULL_ADDRESS
        return MatchLevel.DISTRICT_PROVINCE

    def confidence(self, candidate: RawCandidate) -> float:
        """Provider certainty discounted by ambiguity, clamped to [0, 1]"""
        value = NEUTRAL_SIGNAL if candidate.signal is None else candidate.signal
        value = min(max(value, 0.0), 1.0)
        if candidate.partial_match:
            value *= PARTIAL_MATCH_FACTOR
        alternatives = max(candidate.alternatives, 1)
        value /= 1 + self.ambiguity_penalty * (alternatives - 1)
        return round(min(max(value, 0.0), 1.0), 4)

    def final_score(self, source: ProviderSource, level: MatchLevel, confidence: float, candidate: RawCandidate) -> float:
        trust = self.trust_weights.get(source.value, 0.0)
        score = trust * (self.confidence_weight * confidence + self.match_weight * self.level_weights[level])
        if candidate.components.road and candidate.components.district:
            score += self.completeness_bonus
        return round(score, 4)

    def score(self, query: GeocodeQuery, candidate: RawCandidate, source: ProviderSource) -> ScoredCandidate:
        level = self.match_level(query, candidate)
        confidence = self.confidence(candidate)
        return ScoredCandidate(
            raw=candidate,
            source=source,
            match_level=level,
            confidence=confidence,
            final_score=self.final_score(source, level, confidence, candidate),
        )

    def rank(self, query: GeocodeQuery, candidates: Sequence[RawCandidate], source: ProviderSource) -> List[ScoredCandidate]:
        """Score and sort one provider's candidates, best first"""
        return self.sort([self.score(query, candidate, source) for candidate in candidates])

    @staticmethod
    def granularity_level(candidate: RawCandidate) -> MatchLevel:
        """Match level of a reverse lookup: the finest component the provider resolved"""
        parts = candidate.components
        if parts.house_number:
            return MatchLevel.EXACT
        if parts.road or parts.subdistrict:
            return MatchLevel.FULL_ADDRESS
        if parts.district or parts.city:
            return MatchLevel.DISTRICT_PROVINCE
        if parts.state:
            return MatchLevel.PROVINCE_ONLY
        return MatchLevel.PARTIAL

    def rank_reverse(self, candidates: Sequence[RawCandidate], source: ProviderSource) -> List[ScoredCandidate]:
        scored = []
        for candidate in candidates:
            level = self.granularity_level(candidate)
            confidence = self.confidence(candidate)
            scored.append(ScoredCandidate(
                raw=candidate,
                source=source,
                match_level=level,
                confidence=confidence,
                final_score=self.final_score(source, level, confidence, candidate),
            ))
        return self.sort(scored)

    @staticmethod
    def sort(scored: Sequence[ScoredCandidate]) -> List[ScoredCandidate]:
        """Descending final score; ties keep provider priority, then provider order"""
        indexed = list(enumerate(scored))
        indexed.sort(key=lambda item: (-item[1].final_score, PRIORITY.index(item[1].source.value), item[0]))
        return [candidate for _, candidate in indexed]
