from .country_codes import (
    COUNTRY_NAMES,
    ISO_2_TO_3,
    country_code_to_alpha3,
    country_flag,
    country_name,
)
from .merge import MergedCountryData, country_emissions_frame, merge_country_emissions

__all__ = [
    "COUNTRY_NAMES",
    "ISO_2_TO_3",
    "MergedCountryData",
    "country_code_to_alpha3",
    "country_emissions_frame",
    "country_flag",
    "country_name",
    "merge_country_emissions",
]
