"""Design-related Pydantic schemas"""

from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from config.design_config import DEFAULT_START_PLOT


class IBDGenerateRequest(BaseModel):
    treatments: int
    block_size: int
    replications: int
    locations: int = 1
    seed: Optional[int] = None
    start_plot: int = DEFAULT_START_PLOT


class RerandomizeRequest(BaseModel):
    seed: Optional[int] = None


class IBDGenerateResponse(BaseModel):
    field_book: List[Dict[str, Any]]
    a_efficiency: float
    d_efficiency: float
    blocks_per_replicate: int
    total_units: int
    seed: int
    converged: bool
    degenerate: bool
    warnings: List[str] = []


class RerandomizeResponse(BaseModel):
    field_book: List[Dict[str, Any]]
    mapping: Dict[int, int]
