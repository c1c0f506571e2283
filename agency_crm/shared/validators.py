"""Shared validation utilities"""

import re
from typing import Optional

# Allows formats like (123) 456-7890, 123-456-7890, 1234567890, +1 123 456 7890
PHONE_PATTERN = re.compile(r"^(\+?1[-.\s]?)?(\(?\d{3}\)?[-.\s]?)?\d{3}[-.\s]?\d{4}$")
ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

US_STATES = {
    "AL": "Alabama",
    "AK": "Alaska",
    "AZ": "Arizona",
    "AR": "Arkansas",
    "CA": "California",
    "CO": "Colorado",
    "CT": "Connecticut",
    "DE": "Delaware",
    "FL": "Florida",
    "GA": "Georgia",
    "HI": "Hawaii",
    "ID": "Idaho",
    "IL": "Illinois",
    "IN": "Indiana",
    "IA": "Iowa",
    "KS": "Kansas",
    "KY": "Kentucky",
    "LA": "Louisiana",
    "ME": "Maine",
    "MD": "Maryland",
    "MA": "Massachusetts",
    "MI": "Michigan",
    "MN": "Minnesota",
    "MS": "Mississippi",
    "MO": "Missouri",
    "MT": "Montana",
    "NE": "Nebraska",
    "NV": "Nevada",
    "NH": "New Hampshire",
    "NJ": "New Jersey",
    "NM": "New Mexico",
    "NY": "New York",
    "NC": "North Carolina",
    "ND": "North Dakota",
    "OH": "Ohio",
    "OK": "Oklahoma",
    "OR": "Oregon",
    "PA": "Pennsylvania",
    "RI": "Rhode Island",
    "SC": "South Carolina",
    "SD": "South Dakota",
    "TN": "Tennessee",
    "TX": "Texas",
    "UT": "Utah",
    "VT": "Vermont",
    "VA": "Virginia",
    "WA": "Washington",
    "WV": "West Virginia",
    "WI": "Wisconsin",
    "WY": "Wyoming",
    "DC": "District of Columbia",
}


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a US phone number as typed on the forms.

    The value is stored as entered; only the shape is checked.

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return None

    phone = phone.strip()
    if not PHONE_PATTERN.match(phone):
        raise ValueError("Please enter a valid phone number")
    return phone


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return None

    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Please enter a valid email address")
    return email


def validate_zip_code(zip_code: Optional[str]) -> Optional[str]:
    """Validate a 5 or 9 digit ZIP code"""
    if not zip_code:
        return None

    zip_code = zip_code.strip()
    if not ZIP_PATTERN.match(zip_code):
        raise ValueError("Please enter a valid ZIP code (e.g., 12345 or 12345-6789)")
    return zip_code


def validate_state(state: Optional[str]) -> Optional[str]:
    """Normalize a two-letter state code"""
    if not state:
        return None

    state = state.strip().upper()
    if state not in US_STATES:
        raise ValueError(f"Unknown state code: {state}")
    return state


def validate_required_rate(value: Optional[float]) -> float:
    if value is None or value < 0.01:
        raise ValueError("Rate is required")
    return value


def validate_choice(value: Optional[str], choices: tuple, label: str) -> Optional[str]:
    """Check an enumerated string column value"""
    if value is None:
        return None
    if value not in choices:
        raise ValueError(f"Invalid {label}: {value}. Must be one of: {', '.join(choices)}")
    return value
