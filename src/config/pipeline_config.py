"""Pipeline configuration - Source extracts, load order, column layout"""
import os
from pathlib import Path

# Paths
BASE_DIR = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.getenv("TOURISM_DATA_DIR", str(BASE_DIR / "data" / "UN_TourismCSV")))
CSV_ENCODINGS = ("utf-8", "cp1252")

FAMILY_TOURISM = "tourism"
FAMILY_SDG = "sdg"

# Wide year columns (1995-2022) of the tourism extracts
FIRST_YEAR = 1995
LAST_YEAR = 2022
YEARS = list(range(FIRST_YEAR, LAST_YEAR + 1))
YEAR_COLUMNS = [f"year_{year}" for year in YEARS]

# Raw column names
TOURISM_CODE_COLUMN = "C"
TOURISM_INDICATOR_COLUMN = "S"
TOURISM_COUNTRY_COLUMN = "Basic_data"
TOURISM_LEVEL_COLUMNS = ["Unnamed_5", "Unnamed_6", "Unnamed_7", "Unnamed_8"]
TOURISM_SERIES_COLUMN = "Series"

# Source tables in load order.
# Format: table -> (family, csv file name, field delimiter, has Series column)
# Inbound arrivals was re-exported with ';' because a text field contains a comma.
SOURCE_TABLES = {
    "domestic_accommodation": (FAMILY_TOURISM, "Domestic Tourism-Accommodation.csv", ",", False),
    "domestic_trip": (FAMILY_TOURISM, "Domestic Tourism-Trips.csv", ",", False),
    "inbound_accommodation": (FAMILY_TOURISM, "Inbound Tourism-Accommodation.csv", ",", False),
    "outbound_departures": (FAMILY_TOURISM, "Outbound Tourism-Departures.csv", ",", False),
    "tourism_industries": (FAMILY_TOURISM, "Tourism Industries.csv", ",", False),
    "inbound_arrivals": (FAMILY_TOURISM, "Inbound Tourism-Arrivals.csv", ";", True),
    "inbound_expenditure": (FAMILY_TOURISM, "Inbound Tourism-Expenditure.csv", ",", True),
    "inbound_purpose": (FAMILY_TOURISM, "Inbound Tourism-Purpose.csv", ",", True),
    "inbound_regions": (FAMILY_TOURISM, "Inbound Tourism-Regions.csv", ",", True),
    "inbound_transport": (FAMILY_TOURISM, "Inbound Tourism-Transport.csv", ",", True),
    "outbound_expenditure": (FAMILY_TOURISM, "Outbound Tourism-Expenditure.csv", ",", True),
    "sdg_891": (FAMILY_SDG, "SDG 8.9.1.csv", ",", False),
    "sdg_892": (FAMILY_SDG, "SDG 8.9.2.csv", ",", False),
    "sdg_12b1": (FAMILY_SDG, "SDG 12.b.1.csv", ",", False),
}

LOAD_ORDER = list(SOURCE_TABLES)

# Gold fact tables and the silver tables they unpivot
FACT_SOURCES = {
    "fact_domestic_tourism": ["domestic_accommodation", "domestic_trip"],
    "fact_inbound_tourism": [
        "inbound_accommodation", "inbound_arrivals", "inbound_expenditure",
        "inbound_purpose", "inbound_regions", "inbound_transport",
    ],
    "fact_outbound_tourism": ["outbound_departures", "outbound_expenditure"],
    "fact_tourism_industries": ["tourism_industries"],
}
SDG_FACT_SOURCES = ["sdg_891", "sdg_892", "sdg_12b1"]
