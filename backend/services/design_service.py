"""Design service - wraps core IBD modules"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from core.design_validator import DesignValidator
from core.ibd_designer import (
    IBDDesigner,
    FieldBookRow,
    field_book_from_records,
    relabel,
    row_to_dict,
)
from config.design_config import DEFAULT_START_PLOT

logger = logging.getLogger(__name__)


def serialize_field_book(field_book: List[FieldBookRow]) -> List[Dict[str, Any]]:
    """Field book rows as JSON-serializable dicts"""
    return [row_to_dict(row) for row in field_book]


def validate_design_params(t: Any, k: Any, r: Any, locations: Any) -> Tuple[bool, List[str], List[str]]:
    """
    Validate design parameters without generating.

    Returns:
        (valid, errors, warnings)
    """
    valid, errors = DesignValidator.validate_design_parameters(t, k, r, locations)
    warnings: List[str] = []
    if valid:
        _, warnings = DesignValidator.check_plot_numbering(t, r)
    return valid, errors, warnings


def generate_ibd(
    t: int,
    k: int,
    r: int,
    locations: int = 1,
    seed: Optional[int] = None,
    start_plot: int = DEFAULT_START_PLOT,
) -> Tuple[IBDDesigner, Dict[str, Any]]:
    """
    Generate an incomplete block design and its serializable payload.

    Returns:
        (designer, payload) where payload holds field_book, a_efficiency,
        d_efficiency, blocks_per_replicate, total_units, seed, converged,
        degenerate and warnings

    Raises:
        DesignValidationError: If the parameters are invalid
    """
    designer = IBDDesigner(t, k, r, locations, seed=seed)
    result = designer.generate(start_plot)

    payload = {
        "field_book": serialize_field_book(result.field_book),
        "a_efficiency": result.efficiency.a_efficiency,
        "d_efficiency": result.efficiency.d_efficiency,
        "blocks_per_replicate": result.blocks_per_replicate,
        "total_units": result.parameters.total_units,
        "seed": result.parameters.seed,
        "converged": result.efficiency.converged,
        "degenerate": result.efficiency.degenerate,
        "warnings": list(result.warnings),
    }
    return designer, payload


def rerandomize_designer(designer: IBDDesigner, seed: Optional[int] = None) -> Dict[str, Any]:
    """Relabel the session's design and return the new field book and mapping"""
    field_book = designer.rerandomize(seed)
    return {
        "field_book": serialize_field_book(field_book),
        "mapping": dict(designer.relabel_mapping),
    }


def rerandomize(
    field_book: List[Dict[str, Any]],
    t: int,
    seed: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Relabel an existing field book given as row dicts.

    Args:
        field_book: Rows with either exported headers or attribute names
        t: Number of treatments
        seed: Permutation seed, random when None

    Returns:
        Relabeled rows as dicts

    Raises:
        DesignValidationError: If the rows' treatment ids are not 1..t
    """
    rows = field_book_from_records(field_book)
    relabeled, _ = relabel(rows, t, seed)
    return serialize_field_book(relabeled)
