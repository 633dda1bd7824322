"""Regex tables used by the unit parser and the domain classifier.

Every table is checked in list order; earlier entries take precedence and the
text they match is masked out before later tables run.
"""

import re

from econorm.models import Magnitude, TimeScale

# ---------------------------------------------------------------------------
# Currencies
# ---------------------------------------------------------------------------

#: ISO-4217 codes recognized in unit text.
CURRENCY_CODES: frozenset[str] = frozenset(
    """
    USD EUR GBP JPY CNY CAD AUD CHF SEK NOK DKK NZD SGD HKD KRW INR RUB BRL MXN
    ZAR TRY AED SAR THB MYR IDR PHP VND PKR BDT NGN EGP ARS COP CLP PEN UYU BOB
    PYG VEF VES CRC GTQ HNL NIO DOP JMD TTD BBD BSD BZD XCD HTG SRD GYD AWG KYD
    BMD PAB MAD DZD TND LYD JOD LBP SYP IQD KWD BHD OMR QAR ILS GEL AMD AZN KZT
    KGS TJS TMT UZS AFN MMK LAK KHR NPR LKR MVR BTN MNT KPW TWD MOP BND FJD PGK
    WST SBD TOP VUV XPF ETB KES TZS UGX RWF BIF MGA MWK MZN ZMW ZWL BWP NAD SZL
    LSL GHS GMD GNF LRD SLL XOF XAF CVE STN SCR MUR KMF DJF ERN SSP SDG MRU ALL
    MKD RSD BAM BGN RON MDL UAH BYN PLN CZK HUF HRK ISK CUP AOA CDF IRR YER SOS
    """.split()
)

#: Codes that are also English words or unit abbreviations; only matched
#: when written in uppercase.
AMBIGUOUS_CURRENCY_CODES: frozenset[str] = frozenset(
    {"ALL", "TOP", "CUP", "PEN", "BOB", "GEL", "BAM", "MOP", "TRY", "MAD", "SOS", "KGS"}
)

#: Currency symbols, prefixed dollar variants before the bare "$".
CURRENCY_SYMBOLS: list[tuple[str, str]] = [
    ("us$", "USD"),
    ("nz$", "NZD"),
    ("hk$", "HKD"),
    ("nt$", "TWD"),
    ("mx$", "MXN"),
    ("a$", "AUD"),
    ("c$", "CAD"),
    ("s$", "SGD"),
    ("r$", "BRL"),
    ("$", "USD"),
    ("€", "EUR"),
    ("£", "GBP"),
    ("¥", "JPY"),
    ("₹", "INR"),
    ("₩", "KRW"),
    ("₽", "RUB"),
    ("₺", "TRY"),
    ("₦", "NGN"),
    ("₱", "PHP"),
    ("₫", "VND"),
    ("₪", "ILS"),
    ("฿", "THB"),
    ("₴", "UAH"),
    ("₸", "KZT"),
    ("₵", "GHS"),
]

#: Currency names written out in words.
CURRENCY_WORDS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\bu\.?s\.?\s+dollars?\b"), "USD"),
    (re.compile(r"\beuros?\b"), "EUR"),
    (re.compile(r"\bpounds?\s+sterling\b|\bsterling\b"), "GBP"),
    (re.compile(r"\byen\b"), "JPY"),
    (re.compile(r"\byuan\b|\brenminbi\b|\brmb\b"), "CNY"),
    (re.compile(r"\bswiss\s+francs?\b"), "CHF"),
]

ISO_TOKEN = re.compile(r"(?<![a-z0-9])[a-z]{3}(?![a-z0-9])")

# ---------------------------------------------------------------------------
# Magnitude and time
# ---------------------------------------------------------------------------

#: Hundred-millions precedes millions; hundreds follows it.
MAGNITUDE_PATTERNS: list[tuple[Magnitude, re.Pattern]] = [
    (Magnitude.TRILLIONS, re.compile(r"\btrill?i?on?s?\b|\btn\b")),
    (Magnitude.BILLIONS, re.compile(r"\bbill?i?on?s?\b|\bbn\b|\bbln\b")),
    (Magnitude.HUNDRED_MILLIONS, re.compile(r"\bhundreds?\s+(?:of\s+)?mill?i?on?s?\b")),
    (Magnitude.MILLIONS, re.compile(r"\bmill?i?on?s?\b|\bmn\b|\bmio\b|\bmln\b")),
    (Magnitude.CRORES, re.compile(r"\bcrores?\b|\bcr\b")),
    (Magnitude.LAKHS, re.compile(r"\blakhs?\b|\blacs?\b")),
    (Magnitude.THOUSANDS, re.compile(r"\bthou?sand?s?\b|\bk\b|\b1k\b|\b000s\b|'000")),
    (Magnitude.HUNDREDS, re.compile(r"\bhundreds?\b")),
]

TIME_PATTERNS: list[tuple[TimeScale, re.Pattern]] = [
    (
        TimeScale.YEAR,
        re.compile(
            r"\b(?:per|a|an)\s+(?:year|yr|annum)\b|\bannual(?:ly)?\b|\byearly\b"
            r"|/\s*(?:yr|year|y)\b|\bp\.a\.?|\byoy\b|\by/y\b|\bsaar\b"
        ),
    ),
    (
        TimeScale.QUARTER,
        re.compile(
            r"\b(?:per|a)\s+quarter\b|\bquarterly\b|/\s*(?:q|qtr|quarter)\b|\bqoq\b|\bq/q\b"
        ),
    ),
    (
        TimeScale.MONTH,
        re.compile(r"\b(?:per|a)\s+month\b|\bmonthly\b|/\s*(?:mo|mth|month)\b|\bmom\b|\bm/m\b"),
    ),
    (
        TimeScale.WEEK,
        re.compile(r"\b(?:per|a)\s+week\b|\bweekly\b|/\s*(?:wk|week)\b|\bwow\b|\bw/w\b"),
    ),
    (
        TimeScale.DAY,
        re.compile(r"\b(?:per|a)\s+day\b|\bdaily\b|/\s*(?:d|day)\b"),
    ),
    (
        TimeScale.HOUR,
        re.compile(r"\b(?:per|an)\s+hour\b|\bhourly\b|/\s*(?:h|hr|hour)\b"),
    ),
]

#: Periodicity metadata values mapped to time scales.
PERIODICITY_MAP: dict[str, TimeScale] = {
    "yearly": TimeScale.YEAR,
    "annual": TimeScale.YEAR,
    "annually": TimeScale.YEAR,
    "year": TimeScale.YEAR,
    "a": TimeScale.YEAR,
    "y": TimeScale.YEAR,
    "biannually": TimeScale.YEAR,
    "semi-annual": TimeScale.YEAR,
    "semiannual": TimeScale.YEAR,
    "quarterly": TimeScale.QUARTER,
    "quarter": TimeScale.QUARTER,
    "q": TimeScale.QUARTER,
    "monthly": TimeScale.MONTH,
    "month": TimeScale.MONTH,
    "m": TimeScale.MONTH,
    "weekly": TimeScale.WEEK,
    "week": TimeScale.WEEK,
    "w": TimeScale.WEEK,
    "daily": TimeScale.DAY,
    "day": TimeScale.DAY,
    "d": TimeScale.DAY,
    "hourly": TimeScale.HOUR,
    "hour": TimeScale.HOUR,
    "h": TimeScale.HOUR,
}

# ---------------------------------------------------------------------------
# Non-monetary quantities
# ---------------------------------------------------------------------------

#: (pattern, cosmetic label); "% of GDP" and "pp" precede the bare percent sign.
PERCENT_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"(?:\bpercent\b|\bper\s*cent\b|%)\s*of\s*(?:the\s+)?gdp\b"), "% of GDP"),
    (re.compile(r"(?:\bpercent(?:age)?\b|%)\s*change\b"), "% change"),
    (re.compile(r"\bpercentage\s+points?\b|\bpp\b|\bppts?\b"), "pp"),
    (re.compile(r"\bbasis\s+points?\b|\bbps\b|\bbp\b"), "bps"),
    (re.compile(r"\bpercent(?:age)?\b|\bper\s*cent\b|%"), "%"),
]

RATIO_PATTERNS: list[tuple[re.Pattern, str]] = [
    (
        re.compile(
            r"\bper\s+(?:\d[\d,]*|one\s+thousand|thousand|hundred|million)\s+"
            r"(?:people|persons|inhabitants|population|live\s+births|adults|children)\b"
        ),
        "per capita",
    ),
    (re.compile(r"\bratio\b"), "ratio"),
    (re.compile(r"\btimes\b"), "times"),
]

INDEX_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\b\d{4}\s*=\s*100\b"), "index"),
    (re.compile(r"\bindex\b|\bindices\b"), "index"),
    (re.compile(r"\bdxy\b"), "index"),
    (re.compile(r"\bpoints?\b(?!\s+of)"), "points"),
]

COUNT_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\bpersons?\b|\bpeople\b"), "persons"),
    (re.compile(r"\bhouseholds?\b"), "households"),
    (re.compile(r"\bdwellings?\b"), "dwellings"),
    (re.compile(r"\bcompanies\b|\bfirms?\b"), "companies"),
    (re.compile(r"\bworkers?\b|\bjobs?\b|\bemployees?\b"), "persons"),
    (re.compile(r"\bvehicles?\b|\bcars?\b"), "vehicles"),
    (re.compile(r"\bdoses?\b"), "doses"),
    (re.compile(r"\btourists?\b|\barrivals?\b|\bpassengers?\b"), "persons"),
    (re.compile(r"\bunits?\b"), "units"),
    (re.compile(r"\bnumber(?:\s+of)?\b"), "count"),
]

#: (pattern, canonical label, commodity family or None).
PHYSICAL_PATTERNS: list[tuple[re.Pattern, str, str | None]] = [
    (re.compile(r"\bbarrels?\b|\bbbl\b"), "barrels", "energy"),
    (re.compile(r"\bmmbtu\b|\btherms?\b"), "mmbtu", "energy"),
    (re.compile(r"\b[gmk]wh\b|\bgigawatt[\s-]?hours?\b"), "watt-hours", "energy"),
    (re.compile(r"\bmw\b|\bmegawatts?\b"), "megawatts", "energy"),
    (re.compile(r"\btj\b|\bterajoules?\b"), "terajoules", "energy"),
    (re.compile(r"\bcubic\s+(?:feet|foot|meters?|metres?)\b"), "cubic", "energy"),
    (re.compile(r"\btroy\s+(?:oz|ounces?)\b|\bounces?\b|\boz\b"), "troy oz", "metals"),
    (re.compile(r"\bbushels?\b"), "bushels", "agriculture"),
    (re.compile(r"\bhectares?\b|\bha\b"), "hectares", "agriculture"),
    (re.compile(r"\bhead\b"), "head", "agriculture"),
    (re.compile(r"\b(?:metric\s+)?tonnes?\b|\btons?\b|\bmt\b"), "tonnes", None),
    (re.compile(r"\bkgs?\b|\bkilograms?\b"), "kg", None),
    (re.compile(r"\bpounds?\b|\blbs?\b"), "pounds", None),
    (re.compile(r"\blit(?:er|re)s?\b"), "liters", None),
    (re.compile(r"\bgallons?\b"), "gallons", None),
]

#: Commodity family of each physical unit label.
PHYSICAL_FAMILIES: dict[str, str | None] = {label: family for _, label, family in PHYSICAL_PATTERNS}

#: A currency quoted per physical unit ("USD/Barrel", "EUR per tonne").
PER_PHYSICAL_PATTERN = re.compile(
    r"(?:/|\bper\s+)\s*(?:barrels?|bbl|mmbtu|therms?|[gmk]wh|troy\s+(?:oz|ounces?)|ounces?|oz"
    r"|bushels?|(?:metric\s+)?tonnes?|tons?|mt|kgs?|kilograms?|pounds?|lbs?|lit(?:er|re)s?"
    r"|gallons?|cubic\s+(?:feet|foot|meters?|metres?)|head|dozen|cwt)\b"
)

PER_CAPITA_PATTERN = re.compile(r"\bper\s+capita\b|\bper\s+person\b")

#: Words that carry no unit information on their own.
FILLER_WORDS: frozenset[str] = frozenset(
    """
    per of in and the a an at on to by from for current constant prices price
    nominal real seasonally adjusted sa nsa terms local national currency lcu value
    values total level rate chained usd-equivalent equivalent base basis
    """.split()
)
