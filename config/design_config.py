"""
Design Configuration Constants
Centralized configuration for the incomplete block designer
"""

from typing import Dict, List

# ============================================================================
# PLOT NUMBERING
# ============================================================================

DEFAULT_START_PLOT = 101
"""First plot number of location 1"""

LOCATION_PLOT_OFFSET = 1000
"""Plot-number offset between consecutive locations"""

MAX_PLOTS_PER_LOCATION = LOCATION_PLOT_OFFSET - 1
"""Plots that fit in one location before numbers run into the next location (999)"""


# ============================================================================
# LABELS
# ============================================================================

TREATMENT_LABEL_PREFIX = "G-"
"""Display label prefix for treatment (genotype) entries, e.g. G-12"""

LOCATION_LABEL_PREFIX = "Loc"
"""Display label prefix for locations, e.g. Loc1"""


# ============================================================================
# PARAMETER LIMITS
# ============================================================================

MIN_TREATMENTS = 2
MIN_BLOCK_SIZE = 1
MIN_REPLICATIONS = 1
MIN_LOCATIONS = 1

MAX_RANDOM_SEED = 1_000_000
"""Upper bound (exclusive) for seeds drawn when the user leaves the seed empty"""

DEFAULT_PARAMETERS: Dict[str, int] = {
    "treatments": 12,
    "block_size": 3,
    "replications": 2,
    "locations": 1,
    "start_plot": DEFAULT_START_PLOT,
}


# ============================================================================
# FIELD BOOK
# ============================================================================

FIELD_BOOK_COLUMNS: List[str] = ["ID", "Location", "Plot", "Rep", "IBlock", "Entry", "Treatment"]
"""Column headers of the exported field book"""

FIELD_BOOK_ATTRIBUTES: List[str] = ["id", "location", "plot", "rep", "iblock", "entry", "treatment"]
"""FieldBookRow attributes, in FIELD_BOOK_COLUMNS order"""


# ============================================================================
# ERROR MESSAGES
# ============================================================================

ERROR_MESSAGES: Dict[str, str] = {
    "not_integer": "{name} must be a whole number",
    "min_treatments": f"Number of treatments must be at least {MIN_TREATMENTS}",
    "min_block_size": f"Block size must be at least {MIN_BLOCK_SIZE}",
    "min_replications": f"Number of replications must be at least {MIN_REPLICATIONS}",
    "min_locations": f"Number of locations must be at least {MIN_LOCATIONS}",
    "block_size_too_large": "Block size (k={k}) cannot exceed the number of treatments (t={t})",
    "not_divisible": "Block size (k={k}) does not divide treatment count (t={t}). "
                     "Choose a block size that is a divisor of {t}.",
    "plots_per_location": "Design uses {plots} plots per location; plot numbers will run past "
                          "the {offset}-plot location offset and overlap the next location's range",
    "entries_mismatch": "Field book treatment ids do not match t={t} "
                        "(unexpected ids: {unexpected}, missing ids: {missing})",
}
