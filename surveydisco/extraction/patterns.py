"""Deterministic pattern-based extraction.

Each rule runs independently against the raw text; the first hit wins
unless a rule says otherwise. Used on its own when the LLM is unavailable
and to fill gaps the LLM left empty.
"""

from __future__ import annotations

import re

from surveydisco.models import ExtractedFields, ServiceType

STREET_SUFFIXES = (
    "Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|Boulevard|Blvd|Way|Place|Pl"
    "|Court|Ct|Circle|Cir|Trail|Tr|Parkway|Pkwy"
)

ADDRESS_RE = re.compile(rf"\b\d+\s+[A-Za-z0-9\s.,'-]+(?:{STREET_SUFFIXES})\b", re.IGNORECASE)
LOOSE_ADDRESS_RE = re.compile(r"\b\d+\s+[A-Za-z\s]+\b")
PHONE_RE = re.compile(r"(?:\(\d{3}\)|\b\d{3})[-. ]?\d{3}[-. ]?\d{4}\b")
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PARCEL_RE = re.compile(r"\b(?:parcel|apn|pin)\s*[#:]?\s*([0-9-]+)\b", re.IGNORECASE)
AREA_RE = re.compile(r"\b[0-9]+(?:\.[0-9]+)?\s*(?:ac|acres?)\b", re.IGNORECASE)
COST_RE = re.compile(r"\$(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{2})?")
NAME_RE = re.compile(r"\b[A-Z][a-z]+\s+[A-Z][a-z]+\b")
PREPARED_FOR_RE = re.compile(
    r"(?:prepared for|prep for|for)\s*:?\s*([A-Za-z\s]+?)(?:\n|\.|\Z)", re.IGNORECASE
)

# Ordered: first rule with a matching keyword wins
SERVICE_TYPE_RULES: tuple[tuple[tuple[str, ...], ServiceType], ...] = (
    (("boundary survey", "boundary line"), ServiceType.BOUNDARY_SURVEY),
    (("topographic survey", "topo survey"), ServiceType.TOPOGRAPHIC_SURVEY),
    (("alta survey", "alta/nsps", "alta-nsps"), ServiceType.ALTA_SURVEY),
    (("legal description", "legal desc"), ServiceType.LEGAL_DESCRIPTION),
    (("elevation certificate", "elev cert"), ServiceType.ELEVATION_CERTIFICATE),
    (("subdivision", "plat"), ServiceType.SUBDIVISION),
    (("survey",), ServiceType.SURVEY),
    (("quote", "estimate"), ServiceType.QUOTE_REQUEST),
    (("consultation", "consult"), ServiceType.CONSULTATION),
)


def extract_address(text: str) -> str:
    """Street address with a recognised suffix, else the longest loose match."""
    matches = [m.group(0) for m in ADDRESS_RE.finditer(text)]
    if matches:
        for candidate in matches:
            if "$" not in candidate:
                return candidate.strip()
        return ""

    candidates = [
        m.group(0)
        for m in LOOSE_ADDRESS_RE.finditer(text)
        if "$" not in m.group(0) and len(m.group(0)) > 10 and not m.group(0).strip().isdigit()
    ]
    if not candidates:
        return ""

    best = candidates[0]
    for candidate in candidates[1:]:
        # Ties go to the later match
        best = best if len(best) > len(candidate) else candidate
    return best.strip()


def _first(pattern: re.Pattern[str], text: str, group: int = 0) -> str:
    match = pattern.search(text)
    return match.group(group).strip() if match else ""


def extract_prepared_for(text: str) -> str:
    match = PREPARED_FOR_RE.search(text)
    if not match:
        return ""
    value = match.group(1).strip()
    return value if len(value) > 2 else ""


def classify_service_type(text: str, address: str = "", parcel: str = "") -> str:
    """Apply the ordered keyword rules to lower-cased text."""
    lowered = text.lower()
    for keywords, service_type in SERVICE_TYPE_RULES:
        if any(keyword in lowered for keyword in keywords):
            return service_type.value
    if address or parcel:
        return ServiceType.SURVEY.value
    return ServiceType.GENERAL_INQUIRY.value


def extract_with_patterns(text: str) -> ExtractedFields:
    """Run every pattern rule over ``text``."""
    address = extract_address(text)
    parcel = _first(PARCEL_RE, text, group=1)

    return ExtractedFields(
        client=_first(NAME_RE, text),
        email=_first(EMAIL_RE, text),
        phone=_first(PHONE_RE, text),
        prepared_for=extract_prepared_for(text),
        address=address,
        parcel=parcel,
        area=_first(AREA_RE, text),
        service_type=classify_service_type(text, address, parcel),
        cost_estimate=_first(COST_RE, text),
    )
