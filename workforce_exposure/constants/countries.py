"""
Country names and ISO 3166-1 alpha-2 codes.

``resolve_iso_code`` accepts either a canonical country label or one of the
free-text aliases folded by ``canonical_country``.
"""

from typing import Dict, Optional

from workforce_exposure.constants.aggregation_groups import canonical_country

COUNTRY_NAME_TO_ISO2: Dict[str, str] = {
    "Afghanistan": "AF",
    "Albania": "AL",
    "Argentina": "AR",
    "Australia": "AU",
    "Austria": "AT",
    "Bahrain": "BH",
    "Belgium": "BE",
    "Bosnia and Herzegovina": "BA",
    "Brazil": "BR",
    "Canada": "CA",
    "Cayman Islands": "KY",
    "Chile": "CL",
    "China": "CN",
    "Colombia": "CO",
    "Croatia": "HR",
    "Czech Republic": "CZ",
    "Denmark": "DK",
    "Egypt": "EG",
    "El Salvador": "SV",
    "Estonia": "EE",
    "Finland": "FI",
    "France": "FR",
    "Germany": "DE",
    "Greece": "GR",
    "Hong Kong": "HK",
    "Hong Kong SAR": "HK",
    "Hungary": "HU",
    "India": "IN",
    "Indonesia": "ID",
    "Ireland": "IE",
    "Israel": "IL",
    "Italy": "IT",
    "Japan": "JP",
    "Latvia": "LV",
    "Lithuania": "LT",
    "Luxembourg": "LU",
    "Mainland China": "CN",
    "Malaysia": "MY",
    "Mexico": "MX",
    "Netherlands": "NL",
    "New Zealand": "NZ",
    "Nigeria": "NG",
    "Norway": "NO",
    "Oman": "OM",
    "Philippines": "PH",
    "Poland": "PL",
    "Portugal": "PT",
    "Qatar": "QA",
    "Republic of Korea": "KR",
    "Romania": "RO",
    "Russia": "RU",
    "Saudi Arabia": "SA",
    "Singapore": "SG",
    "South Africa": "ZA",
    "South Korea": "KR",
    "Spain": "ES",
    "Sweden": "SE",
    "Switzerland": "CH",
    "Taiwan": "TW",
    "Thailand": "TH",
    "Turkey": "TR",
    "United Arab Emirates": "AE",
    "United Kingdom": "GB",
    "United States": "US",
    "Vietnam": "VN",
}

_ISO_BY_KEY = {name.lower(): code for name, code in COUNTRY_NAME_TO_ISO2.items()}


def resolve_iso_code(country: Optional[str]) -> Optional[str]:
    """Map a country label (canonical or alias) to its ISO alpha-2 code."""
    if not country or not country.strip():
        return None

    direct = _ISO_BY_KEY.get(country.strip().lower())
    if direct:
        return direct

    canonical = canonical_country(country)
    if canonical:
        return _ISO_BY_KEY.get(canonical.lower())
    return None
