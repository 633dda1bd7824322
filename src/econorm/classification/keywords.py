"""Indicator-name keyword sets used by the domain classifier.

Patterns run against the lowercased indicator name (then the description).
"""

import re

# ---------------------------------------------------------------------------
# Non-monetary quantities named in the indicator title
# ---------------------------------------------------------------------------

PERCENT_NAME = re.compile(r"\bpercent(?:age)?\b|\bpct\b|%")
INDEX_NAME = re.compile(r"\bindex\b|\bindices\b|\bpmi\b")
RATIO_NAME = re.compile(r"\bratio\b")

COUNT_NAME = re.compile(
    r"\bpopulation\b|\bemployed\b|\bunemployed\b|\bemployment\b|\bjobs\b|\bpayrolls?\b"
    r"|\bpersons\b|\bpeople\b|\bhouseholds\b|\bhousing\s+starts\b|\bbuilding\s+permits\b"
    r"|\bbirths\b|\bdeaths\b|\barrivals\b|\btourists\b|\bregistrations\b|\bvehicles?\b"
    r"|\bcar\s+sales\b|\bclaims\b|\bnumber\s+of\b"
)

# ---------------------------------------------------------------------------
# Stock vs flow
# ---------------------------------------------------------------------------

#: Explicit period flows ("FDI inflows", "debt flows"); they beat stock markers.
FLOW_MARKERS = re.compile(r"\bflows?\b|\binflows?\b|\boutflows?\b")

#: Explicit point-in-time levels ("FDI stock", "investment position"); they
#: beat the generic flow nouns below.
STOCK_MARKERS = re.compile(
    r"\bstocks?\b|\bpositions?\b|\boutstanding\b|\bholdings?\b|\breserves?\b"
)

#: Amounts accrued over a period. Checked before STOCK_KEYWORDS so that
#: "balance of trade" and "current account balance" stay flows.
FLOW_KEYWORDS = re.compile(
    r"\bgdp\b|\bgnp\b|\bgni\b|\bproduction\b|\boutput\b|\bexports?\b|\bimports?\b"
    r"|\btrade\b|\bbalance\s+of\s+trade\b|\bcurrent\s+account\b|\brevenues?\b|\bincome\b"
    r"|\bearnings\b|\bwages?\b|\bsalar(?:y|ies)\b|\bcompensation\b|\bspending\b"
    r"|\bexpenditures?\b|\bconsumption\b|\binvestments?\b|\bsales\b|\bremittances\b"
    r"|\bfdi\b|\bsurplus\b|\bdeficit\b|\bprofits?\b|\bcapital\s+formation\b|\bbudget\b"
    r"|\btax\s+receipts\b|\bflows?\b|\binflows?\b|\boutflows?\b"
)

#: Levels held at a point in time.
STOCK_KEYWORDS = re.compile(
    r"\bdebt\b|\breserves?\b|\bbalance\s+sheet\b|\boutstanding\b|\bassets?\b"
    r"|\bliabilit(?:y|ies)\b|\bholdings?\b|\bmoney\s+supply\b|\bm[0-3]\b"
    r"|\bmonetary\s+base\b|\b(?:broad|narrow)\s+money\b|\binventor(?:y|ies)\b"
    r"|\bstocks?\b|\bpositions?\b|\bbalance\b|\blevel\b|\bdeposits?\b|\bloans?\b"
    r"|\bcredit\b|\bmarket\s+cap(?:italization)?\b"
)

# ---------------------------------------------------------------------------
# Commodities
# ---------------------------------------------------------------------------

#: Energy precedes metals precedes agriculture.
COMMODITY_KEYWORDS: list[tuple[str, re.Pattern]] = [
    (
        "energy",
        re.compile(
            r"\belectricity\b|\bgasoline\b|\bpetrol\b|\bdiesel\b|\bcrude\b"
            r"|(?<!palm )(?<!olive )(?<!soybean )\boil\b|\bnatural\s+gas\b|\bgas\b|\bwti\b"
            r"|\bbrent\b|\bcoal\b|\blng\b|\bjet\s+fuel\b|\buranium\b|\bpropane\b"
        ),
    ),
    (
        "metals",
        re.compile(
            r"\bgold\b|\bsilver\b|\bplatinum\b|\bpalladium\b|\bcopper\b|\bsteel\b"
            r"|\balumin(?:i)?um\b|\bnickel\b|\bzinc\b|\blead\b|\btin\b|\biron\s+ore\b"
            r"|\blithium\b|\bcobalt\b"
        ),
    ),
    (
        "agriculture",
        re.compile(
            r"\bwheat\b|\brice\b|\bcorn\b|\bmaize\b|\bsoybeans?\b|\bcoffee\b|\bcocoa\b"
            r"|\bcotton\b|\bpalm\s+oil\b|\bsugar\b|\bgrains?\b|\blivestock\b|\bcattle\b"
            r"|\bhogs\b|\boats\b|\bcanola\b|\brubber\b|\bwool\b|\borange\s+juice\b"
        ),
    ),
]
