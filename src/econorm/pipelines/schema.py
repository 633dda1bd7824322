"""
Raw Point Schema (INPUT)

Field names are the RawPoint attribute names; mapping inputs may use the
camelCase aliases listed in ``RawPoint.FIELD_ALIASES``.
"""

import numbers

RAW_POINT_SCHEMA = {
    # --- Identity ---
    "id": str,                          # Unique within a batch
    "name": str,                        # Indicator name, default grouping key

    # --- Value ---
    "value": numbers.Real,              # Finite number
    "unit": str,                        # Free text ("USD Million", "% of GDP")

    # --- Metadata ---
    "description": str,
    "currency_code": str,               # ISO-4217, used when the unit has none
    "periodicity": str,                 # Monthly, Quarterly, Yearly ...
    "category_group": str,
    "country_code": str,
    "date": str,

    # --- Semantic hints (precomputed upstream) ---
    "domain_hint": str,                 # "stock" | "flow"
    "is_cumulative": bool,              # Year-to-date style series
}

# Fields that must be present and non-empty
REQUIRED_FIELDS = ("id", "name", "value")

# Accepted values of ``domain_hint``
DOMAIN_HINTS = {"stock", "flow"}
