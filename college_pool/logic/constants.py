"""
Engine Constants

Defines the enums, band thresholds, tier midpoints, curated institution tables
and tuning defaults used by the pool balancing engine.
All values are static configuration data; nothing here is mutated at runtime.
"""

from enum import Enum
from typing import Dict, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class Tier(str, Enum):
    """Admission-likelihood tiers."""
    REACH = "reach"      # Stretch school
    MATCH = "match"      # Realistic target
    SAFETY = "safety"    # High confidence


class Region(str, Enum):
    NORTHEAST = "Northeast"
    MID_ATLANTIC = "Mid-Atlantic"
    SOUTH = "South"
    MIDWEST = "Midwest"
    WEST = "West"


class SizeCategory(str, Enum):
    MICRO = "Micro"      # < 2,000
    SMALL = "Small"      # 2,000 - 5,000
    MEDIUM = "Medium"    # 5,001 - 15,000
    LARGE = "Large"      # 15,001 - 30,000
    MEGA = "Mega"        # 30,000+


class TestingPolicy(str, Enum):
    OPTIONAL = "optional"
    REQUIRED = "required"
    BLIND = "blind"


class CandidateOrigin(str, Enum):
    """Where a candidate entered the pool."""
    SEED = "seed"
    GENERATED = "generated"
    REFERENCE = "reference"


TIER_ORDER: Tuple[Tier, ...] = (Tier.REACH, Tier.MATCH, Tier.SAFETY)


# =============================================================================
# SIZE BANDS
# =============================================================================

# (upper bound, category); the first bound the enrollment fits under wins.
# Micro is strict (< 2,000); every other bound is inclusive.
MICRO_UPPER_EXCLUSIVE = 2000
SIZE_BANDS: Tuple[Tuple[int, SizeCategory], ...] = (
    (5000, SizeCategory.SMALL),
    (15000, SizeCategory.MEDIUM),
    (30000, SizeCategory.LARGE),
)

SIZE_DESCRIPTIONS: Dict[str, str] = {
    SizeCategory.MICRO.value: "under 2,000",
    SizeCategory.SMALL.value: "2,000-5,000",
    SizeCategory.MEDIUM.value: "5,000-15,000",
    SizeCategory.LARGE.value: "15,000-30,000",
    SizeCategory.MEGA.value: "30,000+",
}

POLICY_DESCRIPTIONS: Dict[str, str] = {
    TestingPolicy.OPTIONAL.value: "Test Optional",
    TestingPolicy.REQUIRED.value: "Test Required",
    TestingPolicy.BLIND.value: "Test Blind",
}


# =============================================================================
# PROBABILITY ENGINE
# =============================================================================

DEFAULT_GPA = 3.0
DEFAULT_RIGOR = 50.0

# (admit rate upper bound exclusive, central GPA of the admitted population)
CENTRAL_GPA_BANDS: Tuple[Tuple[float, float], ...] = (
    (0.10, 3.95),
    (0.20, 3.85),
    (0.40, 3.60),
    (0.60, 3.30),
)
CENTRAL_GPA_FLOOR = 3.00

GPA_BOOST_PER_POINT = 0.8
GPA_PENALTY_PER_POINT = 1.2
GPA_PENALTY_FLOOR = 0.15
RIGOR_WEIGHT = 0.5

# SAT multiplier anchors: 400 floor, 25th, midpoint, 75th, 75th + overshoot
SAT_FLOOR = 400
SAT_MULTIPLIER_FLOOR = 0.3
SAT_MULTIPLIER_AT_25TH = 0.7
SAT_MULTIPLIER_AT_MID = 1.0
SAT_MULTIPLIER_AT_75TH = 1.5
SAT_MULTIPLIER_CEILING = 2.5
SAT_OVERSHOOT_FOR_CEILING = 200

HIGHLY_SELECTIVE_ADMIT_RATE = 0.15
HIGHLY_SELECTIVE_PROBABILITY_CAP = 18

MIN_PROBABILITY = 1
MAX_PROBABILITY = 95


# =============================================================================
# CLASSIFICATION THRESHOLDS
# =============================================================================

SAFETY_PROBABILITY = 80
MATCH_PROBABILITY = 30

SELECTIVE_REACH_GPA = 3.7          # most-selective + GPA at or below -> reach
FORCED_REACH_ADMIT_RATE = 0.25     # below -> reach
SAFETY_MIN_ADMIT_RATE = 0.50       # at or below -> never safety
SAFETY_MIN_GPA = 3.5               # at or below -> never safety

# Inclusive display bands per tier
DISPLAY_BANDS: Dict[str, Tuple[int, int]] = {
    Tier.REACH.value: (1, 29),
    Tier.MATCH.value: (30, 79),
    Tier.SAFETY.value: (80, 95),
}

# Conceptual midpoints used by backfill reassignment
TIER_MIDPOINTS: Dict[str, int] = {
    Tier.REACH.value: 20,
    Tier.MATCH.value: 45,
    Tier.SAFETY.value: 80,
}


# =============================================================================
# POOL BALANCER
# =============================================================================

DEFAULT_PER_TIER_TARGET = 3
MAX_FILL_ROUNDS = 2
FILL_PADDING = 1                   # ask for (K - count) + padding per tier

# Statistics lookup fan-out
MAX_LOOKUP_WORKERS = 8
LOOKUP_TIMEOUT_SECONDS = 5.0
ENRICHMENT_BUDGET_SECONDS = 20.0

ENGINE_VERSION = "1.0.0"


# =============================================================================
# GEOGRAPHY
# =============================================================================

STATE_TO_REGION: Dict[str, Region] = {
    "MA": Region.NORTHEAST, "CT": Region.NORTHEAST, "NY": Region.NORTHEAST,
    "RI": Region.NORTHEAST, "ME": Region.NORTHEAST, "VT": Region.NORTHEAST,
    "NH": Region.NORTHEAST,
    "PA": Region.MID_ATLANTIC, "NJ": Region.MID_ATLANTIC, "DE": Region.MID_ATLANTIC,
    "MD": Region.MID_ATLANTIC, "VA": Region.MID_ATLANTIC, "WV": Region.MID_ATLANTIC,
    "DC": Region.MID_ATLANTIC,
    "NC": Region.SOUTH, "SC": Region.SOUTH, "GA": Region.SOUTH, "FL": Region.SOUTH,
    "AL": Region.SOUTH, "MS": Region.SOUTH, "LA": Region.SOUTH, "TN": Region.SOUTH,
    "KY": Region.SOUTH, "AR": Region.SOUTH, "TX": Region.SOUTH, "OK": Region.SOUTH,
    "OH": Region.MIDWEST, "MI": Region.MIDWEST, "IN": Region.MIDWEST, "IL": Region.MIDWEST,
    "WI": Region.MIDWEST, "MN": Region.MIDWEST, "IA": Region.MIDWEST, "MO": Region.MIDWEST,
    "KS": Region.MIDWEST, "NE": Region.MIDWEST, "ND": Region.MIDWEST, "SD": Region.MIDWEST,
    "CA": Region.WEST, "OR": Region.WEST, "WA": Region.WEST, "CO": Region.WEST,
    "AZ": Region.WEST, "NV": Region.WEST, "UT": Region.WEST, "NM": Region.WEST,
    "ID": Region.WEST, "MT": Region.WEST, "WY": Region.WEST, "HI": Region.WEST,
    "AK": Region.WEST,
}

STATE_NAMES: Dict[str, str] = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT", "delaware": "DE",
    "florida": "FL", "georgia": "GA", "hawaii": "HI", "idaho": "ID",
    "illinois": "IL", "indiana": "IN", "iowa": "IA", "kansas": "KS",
    "kentucky": "KY", "louisiana": "LA", "maine": "ME", "maryland": "MD",
    "massachusetts": "MA", "michigan": "MI", "minnesota": "MN", "mississippi": "MS",
    "missouri": "MO", "montana": "MT", "nebraska": "NE", "nevada": "NV",
    "new hampshire": "NH", "new jersey": "NJ", "new mexico": "NM", "new york": "NY",
    "north carolina": "NC", "north dakota": "ND", "ohio": "OH", "oklahoma": "OK",
    "oregon": "OR", "pennsylvania": "PA", "rhode island": "RI", "south carolina": "SC",
    "south dakota": "SD", "tennessee": "TN", "texas": "TX", "utah": "UT",
    "vermont": "VT", "virginia": "VA", "washington": "WA", "west virginia": "WV",
    "wisconsin": "WI", "wyoming": "WY", "district of columbia": "DC",
}


# =============================================================================
# CURATED INSTITUTION TABLES
# =============================================================================

# Acronyms and short forms -> canonical normalized key
NAME_ALIASES: Dict[str, str] = {
    "mit": "massachusetts institute of technology",
    "caltech": "california institute of technology",
    "ucla": "university of california los angeles",
    "uc los angeles": "university of california los angeles",
    "uc berkeley": "university of california berkeley",
    "berkeley": "university of california berkeley",
    "cal": "university of california berkeley",
    "ucsd": "university of california san diego",
    "uc san diego": "university of california san diego",
    "ucsb": "university of california santa barbara",
    "uc santa barbara": "university of california santa barbara",
    "uc davis": "university of california davis",
    "uc irvine": "university of california irvine",
    "uci": "university of california irvine",
    "uc santa cruz": "university of california santa cruz",
    "usc": "university of southern california",
    "uchicago": "university of chicago",
    "upenn": "university of pennsylvania",
    "penn": "university of pennsylvania",
    "uva": "university of virginia",
    "unc": "university of north carolina at chapel hill",
    "unc chapel hill": "university of north carolina at chapel hill",
    "university of north carolina": "university of north carolina at chapel hill",
    "nyu": "new york university",
    "cmu": "carnegie mellon university",
    "carnegie mellon": "carnegie mellon university",
    "georgia tech": "georgia institute of technology",
    "rpi": "rensselaer polytechnic institute",
    "washu": "washington university in st louis",
    "wustl": "washington university in st louis",
    "washington university in saint louis": "washington university in st louis",
    "jhu": "johns hopkins university",
    "johns hopkins": "johns hopkins university",
    "gwu": "george washington university",
    "bu": "boston university",
    "umich": "university of michigan",
    "michigan": "university of michigan",
    "ut austin": "university of texas at austin",
    "texas": "university of texas at austin",
    "umd": "university of maryland college park",
    "university of maryland": "university of maryland college park",
    "uiuc": "university of illinois urbana champaign",
    "smu": "southern methodist university",
    "tcu": "texas christian university",
    "penn state": "penn state university",
    "pennsylvania state university": "penn state university",
    "ohio state": "ohio state university",
    "the ohio state university": "ohio state university",
    "uf": "university of florida",
    "fsu": "florida state university",
    "uga": "university of georgia",
    "virginia tech": "virginia polytechnic institute and state university",
    "vt": "virginia polytechnic institute and state university",
    "harvard": "harvard university",
    "yale": "yale university",
    "princeton": "princeton university",
    "columbia": "columbia university",
    "brown": "brown university",
    "dartmouth": "dartmouth college",
    "cornell": "cornell university",
    "duke": "duke university",
    "stanford": "stanford university",
    "northwestern": "northwestern university",
    "notre dame": "university of notre dame",
    "vanderbilt": "vanderbilt university",
    "rice": "rice university",
    "emory": "emory university",
    "georgetown": "georgetown university",
    "tufts": "tufts university",
}

# Institutions whose names mislead state inference, keyed by the full
# canonical key. Matched exactly, never as fragments of a longer name.
INSTITUTION_STATES: Dict[str, str] = {
    "massachusetts institute of technology": "MA",
    "harvard university": "MA",
    "tufts university": "MA",
    "boston college": "MA",
    "boston university": "MA",
    "yale university": "CT",
    "brown university": "RI",
    "dartmouth college": "NH",
    "princeton university": "NJ",
    "rutgers university": "NJ",
    "rutgers university new brunswick": "NJ",
    "columbia university": "NY",
    "cornell university": "NY",
    "new york university": "NY",
    "university of pennsylvania": "PA",
    "penn state university": "PA",
    "carnegie mellon university": "PA",
    "johns hopkins university": "MD",
    "georgetown university": "DC",
    "george washington university": "DC",
    "howard university": "DC",
    "american university": "DC",
    "duke university": "NC",
    "wake forest university": "NC",
    "vanderbilt university": "TN",
    "rice university": "TX",
    "southern methodist university": "TX",
    "texas christian university": "TX",
    "tulane university": "LA",
    "emory university": "GA",
    "university of miami": "FL",
    "miami university": "OH",
    "northwestern university": "IL",
    "university of chicago": "IL",
    "university of notre dame": "IN",
    "purdue university": "IN",
    "washington university in st louis": "MO",
    "university of washington": "WA",
    "stanford university": "CA",
    "california institute of technology": "CA",
    "university of southern california": "CA",
    "pepperdine university": "CA",
    "gonzaga university": "WA",
    "brigham young university": "UT",
}

# Test-required institutions (canonical normalized keys)
TEST_REQUIRED_INSTITUTIONS: Tuple[str, ...] = (
    "massachusetts institute of technology",
    "harvard university",
    "yale university",
    "brown university",
    "dartmouth college",
    "stanford university",
    "california institute of technology",
    "carnegie mellon university",
    "georgetown university",
    "university of pennsylvania",
    "cornell university",
    "johns hopkins university",
    "university of texas at austin",
    "georgia institute of technology",
    "university of florida",
    "florida state university",
    "university of georgia",
    "purdue university",
    "university of tennessee",
    "auburn university",
    "ohio state university",
)

# Most selective institutions (canonical normalized keys)
MOST_SELECTIVE_INSTITUTIONS: Tuple[str, ...] = (
    "harvard university",
    "yale university",
    "princeton university",
    "columbia university",
    "brown university",
    "dartmouth college",
    "cornell university",
    "university of pennsylvania",
    "duke university",
    "stanford university",
    "massachusetts institute of technology",
    "california institute of technology",
    "university of chicago",
    "northwestern university",
    "johns hopkins university",
)

# Public flagships that are never presented above "match".
# Name-based special case; keep to exactly these two.
MATCH_CAPPED_FLAGSHIPS: Tuple[str, ...] = (
    "university of florida",
    "university of texas at austin",
)
