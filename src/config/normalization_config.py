"""Normalization rule tables - Silver layer harmonization data

Every table here is plain data consumed by src.etl.silver.rules.
Adding an alias, override or remap never requires touching the algorithms.
Bump RULESET_VERSION whenever a table changes.
"""

RULESET_VERSION = "2024.2"

# Source placeholder for "not available"
PLACEHOLDER_TOKENS = {".."}

# Rows whose country cell starts with one of these are footnotes/headers
HEADER_PREFIXES = ('"The information', "Source")

# Indicator-code overrides, scoped per source table.
# These tables only ever use the short form; the canonical series id is the
# longer one used elsewhere.
INDICATOR_OVERRIDES = {
    "domestic_accommodation": {"2.2": "2.20"},
    "inbound_accommodation": {"1.3": "1.30"},
}

# Country aliases (pattern -> canonical name).
# '*' matches any run of characters. Matching is case/whitespace-insensitive
# and runs on the encoding-repaired name first, then on the literal value.
TOURISM_COUNTRY_ALIASES = [
    ("COTE D'IVOIRE", "COTE D'IVOIRE"),
    ("COTE D┬┤IVOIRE", "COTE D'IVOIRE"),   # literal cp437 mojibake
    ("BOLIVIA, PLURINATIONAL STATE OF", "BOLIVIA"),
    ("CURACAO", "CURACAO"),
    ("CURA├çAO", "CURACAO"),               # literal cp437 mojibake
    ("HONG KONG, CHINA", "HONG KONG"),
    ("KOREA, DEMOCRATIC PEOPLE*S REPUBLIC OF", "NORTH KOREA"),
    ("KOREA, REPUBLIC OF", "SOUTH KOREA"),
    ("LAO PEOPLE*S DEMOCRATIC REPUBLIC", "LAOS"),
    ("MACAO, CHINA", "MACAO"),
    ("MICRONESIA, FEDERATED STATES OF", "MICRONESIA"),
    ("MOLDOVA, REPUBLIC OF", "MOLDOVA"),
    ("SINT MAARTEN (DUTCH PART)", "SINT MAARTEN"),
    ("TANZANIA, UNITED REPUBLIC OF", "TANZANIA"),
    ("TIMOR-LESTE", "TIMOR EST"),
    ("VENEZUELA, BOLIVARIAN REPUBLIC OF", "VENEZUELA"),
    ("T*RKIYE", "TURKIYE"),
    ("CZECH REPUBLIC (CZECHIA)", "CZECHIA"),
    ("CONGO, DEMOCRATIC REPUBLIC OF THE", "DEMOCRATIC REPUBLIC OF CONGO"),
    ("IRAN, ISLAMIC REPUBLIC OF", "IRAN"),
    ("SYRIAN ARAB REPUBLIC", "SYRIA"),
    ("TAIWAN PROVINCE OF CHINA", "TAIWAN"),
]

SDG_COUNTRY_ALIASES = [
    ("C*TE D'IVOIRE", "COTE D'IVOIRE"),
    ("CHINA, HONG KONG SPECIAL ADMINISTRATIVE REGION", "HONG KONG"),
    ("CHINA, MACAO SPECIAL ADMINISTRATIVE REGION", "MACAO"),
    ("MICRONESIA (FEDERATED STATES OF)", "MICRONESIA"),
    ("NETHERLANDS (KINGDOM OF THE)", "NETHERLANDS"),
    ("R*UNION", "REUNION"),
    ("T*RKIYE", "TURKIYE"),
    ("UNITED KINGDOM OF GREAT BRITAIN AND NORTHERN IRELAND", "UNITED KINGDOM"),
    ("REPUBLIC OF KOREA", "SOUTH KOREA"),
    ("DEMOCRATIC REPUBLIC OF THE CONGO", "DEMOCRATIC REPUBLIC OF CONGO"),
    ("BOLIVIA (PLURINATIONAL STATE OF)", "BOLIVIA"),
    ("BONAIRE, SINT EUSTATIUS AND SABA", "SINT EUSTATIUS"),
    ("CURA*AO", "CURACAO"),
    ("IRAN (ISLAMIC REPUBLIC OF)", "IRAN"),
    ("LAO PEOPLE*S DEMOCRATIC REPUBLIC", "LAOS"),
    ("SINT MAARTEN (DUTCH PART)", "SINT MAARTEN"),
    ("TIMOR-LESTE", "TIMOR EST"),
    ("SYRIAN ARAB REPUBLIC", "SYRIA"),
    ("REPUBLIC OF MOLDOVA", "MOLDOVA"),
]

# Geographic code remaps for the SDG tables.
# Format: table -> {"codes": {raw: remapped}, "names": {raw: display name}}
# A name override must always travel with a code remap for the same raw code.
LEGACY_GEO_CODES = {534: 663, 535: 658}

GEO_REMAPS = {
    "sdg_891": {"codes": dict(LEGACY_GEO_CODES), "names": {}},
    "sdg_892": {"codes": {**LEGACY_GEO_CODES, 231: 230}, "names": {}},
    "sdg_12b1": {"codes": {**LEGACY_GEO_CODES, 231: 288}, "names": {231: "GHANA"}},
}

# Gold: indicator-name decorations.
# Format: indicator code -> (mode, text); mode is 'suffix' or 'replace'
INDICATOR_NAME_RULES = {
    "2.19": ("suffix", " (ACCOMMODATION)"),
    "2.20": ("suffix", " (ACCOMMODATION)"),
    "2.21": ("suffix", " (HOTELS AND SIMILAR ESTABLISHMENTS)"),
    "2.22": ("suffix", " (HOTELS AND SIMILAR ESTABLISHMENTS)"),
    "1.29": ("suffix", " (ACCOMMODATION)"),
    "1.30": ("suffix", " (ACCOMMODATION)"),
    "1.31": ("suffix", " (HOTELS AND SIMILAR ESTABLISHMENTS)"),
    "1.32": ("suffix", " (HOTELS AND SIMILAR ESTABLISHMENTS)"),
    "1.14": ("suffix", " PURPOSE"),
    "1.5": ("suffix", " REGIONS"),
    "1.19": ("suffix", " TRANSPORT"),
    "1.4": ("replace", "CRUISE PASSENGERS"),
    "1.13": ("replace", "NATIONALS RESIDING ABROAD"),
}

# Gold: unit-of-measure harmonization (applied after upper-casing)
UNIT_ALIASES = {
    "UNITS": "NUMBER",
    "NIGHTS": "AVG_NIGHTS",
}

# Gold: readable SDG indicator labels keyed by series description
SDG_INDICATOR_LABELS = {
    "Tourism direct GDP as a proportion of total GDP (%)": "SDG_8.9.1_GDP",
    "Employed persons in the tourism industries (number)": "SDG_8.9.2_EMP",
    "Implementation of standard accounting tools to monitor the economic and "
    "environmental aspects of tourism (SEEA tables)": "SDG_12.b.1_SEEA",
}
