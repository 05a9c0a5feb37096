"""
ntsbexplorer/display.py
-----------------------
Human-readable labels for NTSB codes and dates.
"""

SEVERITY_LABELS = {
    "FATL": "Fatal",
    "SERS": "Serious Injury",
    "MINR": "Minor Injury",
    "NONE": "No Injury",
}

LIGHT_LABELS = {
    "DAYL": "Daylight",
    "NITE": "Night",
    "DUSK": "Dusk",
    "DAWN": "Dawn",
}

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def severity_label(code: str | None) -> str:
    return SEVERITY_LABELS.get(code, "Unknown")


def light_label(code: str | None) -> str:
    if not code:
        return "Unknown"
    return LIGHT_LABELS.get(code, code)


def format_event_date(value: str | None) -> str:
    """
    Format an NTSB "MM/DD/YY[YY] ..." date as "March 14, 2019".

    Values that don't have three date parts are returned unchanged.
    """
    if not value:
        return "Unknown"

    parts = value.split(" ")[0].split("/")
    if len(parts) != 3:
        return value

    try:
        month, day, year = (int(p) for p in parts)
    except ValueError:
        return value
    if not 1 <= month <= 12:
        return value

    if year < 100:
        year = 2000 + year if year < 50 else 1900 + year

    return f"{MONTHS[month - 1]} {day}, {year}"
