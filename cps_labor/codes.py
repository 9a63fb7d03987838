"""
Display names for CPS industry and occupation recodes.

Two granularities exist for each dimension (detailed and major group); the
tables are keyed by the record-batch column they describe so the two code
spaces can never be confused. ``Lookups`` is read-only and is passed
explicitly to the report builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping

# PRDTIND1
INDUSTRY_DETAILED_NAMES: Dict[int, str] = {
    1: "Agriculture",
    2: "Forestry, logging, fishing, and hunting",
    3: "Mining, quarrying, and oil and gas extraction",
    4: "Construction",
    5: "Nonmetallic mineral product manufacturing",
    6: "Primary metals and fabricated metal products",
    7: "Machinery manufacturing",
    8: "Computer and electronic product manufacturing",
    9: "Electrical equipment, appliance manufacturing",
    10: "Transportation equipment manufacturing",
    11: "Wood products",
    12: "Furniture and fixtures manufacturing",
    13: "Miscellaneous and not specified manufacturing",
    14: "Food manufacturing",
    15: "Beverage and tobacco products",
    16: "Textile, apparel, and leather manufacturing",
    17: "Paper and printing",
    18: "Petroleum and coal products manufacturing",
    19: "Chemical manufacturing",
    20: "Plastics and rubber products",
    21: "Wholesale trade",
    22: "Retail trade",
    23: "Transportation and warehousing",
    24: "Utilities",
    25: "Publishing industries (except internet)",
    26: "Motion picture and sound recording industries",
    27: "Broadcasting (except internet)",
    28: "Internet publishing and broadcasting",
    29: "Telecommunications",
    30: "Internet service providers and data processing services",
    31: "Other information services",
    32: "Finance",
    33: "Insurance",
    34: "Real estate",
    35: "Rental and leasing services",
    36: "Professional, scientific, and technical services",
    37: "Management of companies and enterprises",
    38: "Administrative and support services",
    39: "Waste management and remediation services",
    40: "Educational services",
    41: "Hospitals",
    42: "Health care services, except hospitals",
    43: "Social assistance services",
    44: "Arts, entertainment, and recreation",
    45: "Accommodation",
    46: "Food services and drinking places",
    47: "Repair and maintenance",
    48: "Personal and laundry services",
    49: "Membership associations and organizations",
    50: "Private households",
    51: "Public administration",
    52: "Armed forces",
}

# PRMJIND1
INDUSTRY_MAJOR_NAMES: Dict[int, str] = {
    1: "Agriculture, forestry, fishing, and hunting",
    2: "Mining",
    3: "Construction",
    4: "Manufacturing",
    5: "Wholesale and retail trade",
    6: "Transportation and utilities",
    7: "Information",
    8: "Financial activities",
    9: "Professional and business services",
    10: "Educational and health services",
    11: "Leisure and hospitality",
    12: "Other services",
    13: "Public administration",
    14: "Armed Forces",
}

# PRDTOCC1
OCCUPATION_DETAILED_NAMES: Dict[int, str] = {
    1: "Management",
    2: "Business and financial operations",
    3: "Computer and mathematical",
    4: "Architecture and engineering",
    5: "Life, physical, and social science",
    6: "Community and social service",
    7: "Legal",
    8: "Education, training, and library",
    9: "Arts, design, entertainment, sports, and media",
    10: "Healthcare practitioners and technical",
    11: "Healthcare support",
    12: "Protective service",
    13: "Food preparation and serving",
    14: "Building and grounds cleaning and maintenance",
    15: "Personal care and service",
    16: "Sales",
    17: "Office and administrative support",
    18: "Farming, fishing, and forestry",
    19: "Construction and extraction",
    20: "Installation, maintenance, and repair",
    21: "Production",
    22: "Transportation and material moving",
    23: "Armed Forces",
}

# PRMJOCC1
OCCUPATION_MAJOR_NAMES: Dict[int, str] = {
    1: "Management, business, and financial",
    2: "Professional and related",
    3: "Service",
    4: "Sales and related",
    5: "Office and administrative support",
    6: "Farming, fishing, and forestry",
    7: "Construction and extraction",
    8: "Installation, maintenance, and repair",
    9: "Production",
    10: "Transportation and material moving",
    11: "Armed Forces",
}


def _freeze(tables: Mapping[str, Mapping[int, str]]) -> Mapping[str, Mapping[int, str]]:
    return MappingProxyType(
        {column: MappingProxyType(dict(names)) for column, names in tables.items()}
    )


@dataclass(frozen=True)
class Lookups:
    """Read-only code -> name tables keyed by record-batch column."""

    tables: Mapping[str, Mapping[int, str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tables", _freeze(self.tables))

    def name(self, column: str, code: int, kind: str) -> str:
        """Resolve ``code`` in ``column``; unknown codes get ``"<Kind> <code>"``."""
        names = self.tables.get(column, {})
        return names.get(int(code), f"{kind.title()} {int(code)}")


def load_lookups() -> Lookups:
    """Build the default tables once at startup."""
    return Lookups(
        {
            "industry_detailed": INDUSTRY_DETAILED_NAMES,
            "industry_major": INDUSTRY_MAJOR_NAMES,
            "occupation_detailed": OCCUPATION_DETAILED_NAMES,
            "occupation_major": OCCUPATION_MAJOR_NAMES,
        }
    )


DEFAULT_LOOKUPS: Lookups = load_lookups()
