"""Configuration routes - serves static config data"""

from fastapi import APIRouter

from config.design_config import (
    DEFAULT_PARAMETERS, DEFAULT_START_PLOT, LOCATION_PLOT_OFFSET,
    MAX_PLOTS_PER_LOCATION, MIN_TREATMENTS, MIN_BLOCK_SIZE,
    MIN_REPLICATIONS, MIN_LOCATIONS, TREATMENT_LABEL_PREFIX,
    FIELD_BOOK_COLUMNS,
)
from core.constants import JACOBI_TOLERANCE, JACOBI_MAX_SWEEPS

router = APIRouter()


@router.get("/defaults")
async def get_defaults():
    """Get default design parameters and their limits"""
    return {
        "defaults": DEFAULT_PARAMETERS,
        "limits": {
            "min_treatments": MIN_TREATMENTS,
            "min_block_size": MIN_BLOCK_SIZE,
            "min_replications": MIN_REPLICATIONS,
            "min_locations": MIN_LOCATIONS,
        },
    }


@router.get("/constants")
async def get_constants():
    """Get plot numbering, labeling and solver constants"""
    return {
        "default_start_plot": DEFAULT_START_PLOT,
        "location_plot_offset": LOCATION_PLOT_OFFSET,
        "max_plots_per_location": MAX_PLOTS_PER_LOCATION,
        "treatment_label_prefix": TREATMENT_LABEL_PREFIX,
        "field_book_columns": FIELD_BOOK_COLUMNS,
        "jacobi_tolerance": JACOBI_TOLERANCE,
        "jacobi_max_sweeps": JACOBI_MAX_SWEEPS,
    }
