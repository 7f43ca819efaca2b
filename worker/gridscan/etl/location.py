"""Normalize free-form US locations into the provider's "City,State,United States" form."""

import re

US_STATES = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas", "CA": "California",
    "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware", "FL": "Florida", "GA": "Georgia",
    "HI": "Hawaii", "ID": "Idaho", "IL": "Illinois", "IN": "Indiana", "IA": "Iowa",
    "KS": "Kansas", "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada", "NH": "New Hampshire",
    "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York", "NC": "North Carolina",
    "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma", "OR": "Oregon", "PA": "Pennsylvania",
    "RI": "Rhode Island", "SC": "South Carolina", "SD": "South Dakota", "TN": "Tennessee",
    "TX": "Texas", "UT": "Utah", "VT": "Vermont", "VA": "Virginia", "WA": "Washington",
    "WV": "West Virginia", "WI": "Wisconsin", "WY": "Wyoming", "DC": "District of Columbia",
}

COUNTRY_NAME = "United States"

_CITY_STATE_RE = re.compile(r"^(.+?)[,\s]+([A-Za-z]{2})$")
_ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")


def normalize_location(value: str) -> str:
    """Best-effort conversion of "Seattle, WA" style input.

    Unknown state codes are not an error; they fall back to appending the country.
    """
    if COUNTRY_NAME in value:
        return value

    stripped = value.strip()
    match = _CITY_STATE_RE.match(stripped)
    if match:
        city = match.group(1).strip()
        state_name = US_STATES.get(match.group(2).upper())
        if state_name:
            return f"{city},{state_name},{COUNTRY_NAME}"

    if _ZIP_RE.match(stripped):
        return stripped

    return f"{stripped},{COUNTRY_NAME}"
