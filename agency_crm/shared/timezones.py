"""US state to IANA timezone lookup"""

from typing import Optional

# States with split zones (FL, IN, KY, TN, TX, KS, NE, ND, SD, ID, OR, NV) map to their
# majority zone; border addresses should be adjusted by hand
STATE_TIMEZONES = {
    # Eastern
    "CT": "America/New_York",
    "DE": "America/New_York",
    "DC": "America/New_York",
    "FL": "America/New_York",
    "GA": "America/New_York",
    "IN": "America/Indiana/Indianapolis",
    "KY": "America/New_York",
    "ME": "America/New_York",
    "MD": "America/New_York",
    "MA": "America/New_York",
    "MI": "America/Detroit",
    "NH": "America/New_York",
    "NJ": "America/New_York",
    "NY": "America/New_York",
    "NC": "America/New_York",
    "OH": "America/New_York",
    "PA": "America/New_York",
    "RI": "America/New_York",
    "SC": "America/New_York",
    "VT": "America/New_York",
    "VA": "America/New_York",
    "WV": "America/New_York",
    # Central
    "AL": "America/Chicago",
    "AR": "America/Chicago",
    "IL": "America/Chicago",
    "IA": "America/Chicago",
    "KS": "America/Chicago",
    "LA": "America/Chicago",
    "MN": "America/Chicago",
    "MS": "America/Chicago",
    "MO": "America/Chicago",
    "NE": "America/Chicago",
    "ND": "America/Chicago",
    "OK": "America/Chicago",
    "SD": "America/Chicago",
    "TN": "America/Chicago",
    "TX": "America/Chicago",
    "WI": "America/Chicago",
    # Mountain
    "AZ": "America/Phoenix",
    "CO": "America/Denver",
    "ID": "America/Boise",
    "MT": "America/Denver",
    "NM": "America/Denver",
    "UT": "America/Denver",
    "WY": "America/Denver",
    # Pacific
    "CA": "America/Los_Angeles",
    "NV": "America/Los_Angeles",
    "OR": "America/Los_Angeles",
    "WA": "America/Los_Angeles",
    "AK": "America/Anchorage",
    "HI": "America/Honolulu",
    # Territories
    "PR": "America/Puerto_Rico",
    "VI": "America/Virgin",
    "GU": "Pacific/Guam",
    "AS": "Pacific/Pago_Pago",
    "MP": "Pacific/Guam",
}

TIMEZONE_DISPLAY_NAMES = {
    "America/New_York": "Eastern Time (ET)",
    "America/Indiana/Indianapolis": "Eastern Time (ET)",
    "America/Detroit": "Eastern Time (ET)",
    "America/Chicago": "Central Time (CT)",
    "America/Denver": "Mountain Time (MT)",
    "America/Boise": "Mountain Time (MT)",
    "America/Phoenix": "Arizona Time (MST - No DST)",
    "America/Los_Angeles": "Pacific Time (PT)",
    "America/Anchorage": "Alaska Time (AKT)",
    "America/Honolulu": "Hawaii Time (HT)",
    "America/Puerto_Rico": "Atlantic Time (AT)",
    "America/Virgin": "Atlantic Time (AT)",
    "Pacific/Guam": "Chamorro Time (ChST)",
    "Pacific/Pago_Pago": "Samoa Time (SST)",
}

TIMEZONE_OPTIONS = [
    {"value": "America/New_York", "label": "Eastern Time (ET)"},
    {"value": "America/Chicago", "label": "Central Time (CT)"},
    {"value": "America/Denver", "label": "Mountain Time (MT)"},
    {"value": "America/Phoenix", "label": "Arizona Time (MST - No DST)"},
    {"value": "America/Los_Angeles", "label": "Pacific Time (PT)"},
    {"value": "America/Anchorage", "label": "Alaska Time (AKT)"},
    {"value": "America/Honolulu", "label": "Hawaii Time (HT)"},
    {"value": "America/Puerto_Rico", "label": "Atlantic Time (AT)"},
    {"value": "Pacific/Guam", "label": "Chamorro Time (ChST)"},
    {"value": "Pacific/Pago_Pago", "label": "Samoa Time (SST)"},
]


def get_timezone_from_state(state_code: Optional[str]) -> Optional[str]:
    if not state_code:
        return None
    return STATE_TIMEZONES.get(state_code.strip().upper())


def get_timezone_display_name(timezone: Optional[str]) -> str:
    if not timezone:
        return ""
    return TIMEZONE_DISPLAY_NAMES.get(timezone, timezone)
