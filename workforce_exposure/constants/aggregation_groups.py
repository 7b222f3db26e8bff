"""
Alias tables for comparative grouping.

Headquarters countries and industries come from free-text research output,
so the same group shows up under many spellings ("USA", "U.S.",
"United States"; "IT Services", "Software"). Both lookups are
case-insensitive on the trimmed label; labels without an alias pass
through unchanged.
"""

from typing import Dict, Optional

COUNTRY_GROUP_ALIASES: Dict[str, str] = {
    "USA": "United States",
    "U.S.A.": "United States",
    "US": "United States",
    "U.S.": "United States",
    "United States of America": "United States",
    "Bermuda": "United States",
    "Ireland (legal domicile), United States (operational HQ in Pennsylvania)": "United States",
    "France/Italy": "France",
    "Hong Kong": "China",
    "Hong Kong SAR": "China",
    "China / Hong Kong": "China",
    "Greater China": "China",
    "Mainland China": "China",
    "UK": "United Kingdom",
    "U.K.": "United Kingdom",
    "Great Britain": "United Kingdom",
    "England": "United Kingdom",
    "Korea": "South Korea",
    "Republic of Korea": "South Korea",
    "KSA": "Saudi Arabia",
    "Saudi Arabia (KSA)": "Saudi Arabia",
    "UAE": "United Arab Emirates",
    "U.A.E.": "United Arab Emirates",
    "United Arab Emirates (Dubai)": "United Arab Emirates",
    "Taiwan (ROC)": "Taiwan",
}

INDUSTRY_GROUP_ALIASES: Dict[str, str] = {
    # Transportation & logistics
    "Airlines": "Transportation & Logistics",
    "Logistics & Transportation": "Transportation & Logistics",
    "Rail Transportation": "Transportation & Logistics",
    # Hospitality & leisure
    "Hospitality": "Hospitality & Leisure",
    "Restaurants": "Hospitality & Leisure",
    "Food Delivery & Services": "Hospitality & Leisure",
    "Leisure & Travel": "Hospitality & Leisure",
    "Online Travel": "Hospitality & Leisure",
    # Utilities & infrastructure
    "Utilities": "Utilities & Infrastructure",
    "Infrastructure": "Utilities & Infrastructure",
    "Energy Infrastructure": "Utilities & Infrastructure",
    "Environmental Services": "Utilities & Infrastructure",
    "Renewable Energy": "Utilities & Infrastructure",
    # Software & IT services
    "Software": "Software & IT Services",
    "IT Services": "Software & IT Services",
    "Enterprise Software": "Software & IT Services",
    "Information Services": "Software & IT Services",
    "Cybersecurity": "Software & IT Services",
    # Telecommunications
    "Communications Equipment": "Telecommunications",
    "Telecommunications Equipment": "Telecommunications",
    "Telecommunications Infrastructure": "Telecommunications",
    "Networking Equipment": "Telecommunications",
    "Media & Telecommunications": "Telecommunications",
    # Industrial
    "Industrial Equipment": "Industrial Equipment & Automation",
    "Industrial Automation": "Industrial Equipment & Automation",
    "Industrial Distribution": "Industrial Equipment & Automation",
    "Electronics Manufacturing": "Industrial Equipment & Automation",
    "Construction": "Industrial Equipment & Automation",
    "Building Materials": "Industrial Equipment & Automation",
    "Packaging": "Industrial Equipment & Automation",
    "Materials": "Industrial Equipment & Automation",
    "Aerospace & Defense": "Industrial Equipment & Automation",
    "Trading Company": "Industrial Conglomerate",
    "Conglomerate": "Industrial Conglomerate",
    # Automotive
    "Electric Vehicles": "Automotive Manufacturing",
    "Electric Vehicles & Batteries": "Automotive Manufacturing",
    "Automotive Products": "Automotive Manufacturing",
    "Automotive Parts": "Automotive Manufacturing",
    # Energy and extractives
    "Energy Services": "Oil & Gas",
    "Metals": "Mining",
    "Data Centers": "Real Estate",
    # Healthcare and life sciences
    "Healthcare Services": "Healthcare Services & Distribution",
    "Healthcare Distribution": "Healthcare Services & Distribution",
    "Retail Pharmacy": "Healthcare Services & Distribution",
    "Medical Devices": "Medical Devices & Diagnostics",
    "Healthcare Equipment": "Medical Devices & Diagnostics",
    "Healthcare & Imaging": "Medical Devices & Diagnostics",
    "Life Sciences & Diagnostics": "Medical Devices & Diagnostics",
    "Biotechnology": "Pharmaceuticals",
    # Consumer and retail
    "Retail & Industrial": "Retail",
    "Agriculture": "Food Products",
    "Nutrition & Materials": "Food Products",
    "Personal Care": "Luxury Goods",
    "Consumer Electronics": "Consumer Products",
    "IT Hardware": "Electronics Manufacturing",
    # Finance
    "Financial Technology": "Financial Services",
    "Asset Management": "Financial Services",
    "Insurance Brokerage": "Insurance",
    # Media and internet
    "E-Commerce Platform": "E-Commerce",
    "Social Media": "Internet Services",
    "Advertising & Marketing": "Media & Entertainment",
}

_COUNTRY_BY_KEY = {alias.lower(): label for alias, label in COUNTRY_GROUP_ALIASES.items()}
_INDUSTRY_BY_KEY = {alias.lower(): label for alias, label in INDUSTRY_GROUP_ALIASES.items()}


def _canonical(raw: Optional[str], aliases: Dict[str, str]) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    trimmed = raw.strip()
    if not trimmed:
        return None
    return aliases.get(trimmed.lower(), trimmed)


def canonical_country(raw: Optional[str]) -> Optional[str]:
    """Canonical country group label, or None for a blank label."""
    return _canonical(raw, _COUNTRY_BY_KEY)


def canonical_industry(raw: Optional[str]) -> Optional[str]:
    """Canonical industry group label, or None for a blank label."""
    return _canonical(raw, _INDUSTRY_BY_KEY)
