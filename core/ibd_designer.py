"""
Resolvable Incomplete Block Design Generation
Randomized field layouts with efficiency estimation and re-randomization
"""

import logging
from dataclasses import dataclass, field, asdict, replace
from typing import Dict, List, Optional, Tuple

import pandas as pd

from config.design_config import (
    DEFAULT_START_PLOT,
    LOCATION_PLOT_OFFSET,
    TREATMENT_LABEL_PREFIX,
    LOCATION_LABEL_PREFIX,
    FIELD_BOOK_COLUMNS,
    FIELD_BOOK_ATTRIBUTES,
)
from core.constants import EFFICIENCY_DISPLAY_PRECISION
from core.design_validator import DesignValidator, DesignValidationError
from core.efficiency import EfficiencyReport, compute_design_efficiency
from core.randomization import Mulberry32, derive_location_seed, random_seed, shuffle

logger = logging.getLogger(__name__)

# location -> replicate -> block -> treatment ids
DesignStructure = List[List[List[List[int]]]]


def treatment_label(entry: int) -> str:
    """Display label for a treatment id, e.g. 7 -> 'G-7'"""
    return f"{TREATMENT_LABEL_PREFIX}{entry}"


def location_label(location: int) -> str:
    """Display label for a 1-based location index, e.g. 2 -> 'Loc2'"""
    return f"{LOCATION_LABEL_PREFIX}{location}"


@dataclass(frozen=True)
class DesignParameters:
    """Inputs of one incomplete block design"""
    treatments: int
    block_size: int
    replications: int
    locations: int = 1
    seed: int = 0
    start_plot: int = DEFAULT_START_PLOT

    @property
    def blocks_per_replicate(self) -> int:
        return self.treatments // self.block_size

    @property
    def total_units(self) -> int:
        return self.treatments * self.replications * self.locations

    def location_start_plot(self, location: int) -> int:
        """First plot number of a 1-based location"""
        return self.start_plot + (location - 1) * LOCATION_PLOT_OFFSET


@dataclass
class FieldBookRow:
    """One plot of the field book"""
    id: int
    location: str
    location_index: int
    plot: int
    rep: int
    iblock: int
    entry: int
    treatment: str

    def to_record(self) -> Dict[str, object]:
        """Row keyed by the exported column headers"""
        return {col: getattr(self, attr) for col, attr in zip(FIELD_BOOK_COLUMNS, FIELD_BOOK_ATTRIBUTES)}


@dataclass
class IBDResult:
    """Output of IBDDesigner.generate()"""
    parameters: DesignParameters
    field_book: List[FieldBookRow]
    structure: DesignStructure
    efficiency: EfficiencyReport
    warnings: List[str] = field(default_factory=list)

    @property
    def blocks_per_replicate(self) -> int:
        return self.parameters.blocks_per_replicate


def construct_design(params: DesignParameters) -> Tuple[List[FieldBookRow], DesignStructure]:
    """
    Build the randomized resolvable block layout.

    Each location draws from its own PRNG stream seeded with
    derive_location_seed(seed, location). Within a location every replicate
    is an independent shuffle of 1..t cut into t/k contiguous blocks of k.

    Args:
        params: Design parameters (validated)

    Returns:
        (field_book, structure)
        - field_book: One FieldBookRow per plot, in location/rep/block/position order
        - structure: location -> replicate -> block -> treatment ids

    Raises:
        DesignValidationError: If the parameters are invalid
    """
    t = params.treatments
    k = params.block_size
    DesignValidator.ensure_valid(t, k, params.replications, params.locations)

    s = params.blocks_per_replicate
    treatments = list(range(1, t + 1))

    field_book: List[FieldBookRow] = []
    structure: DesignStructure = []
    global_id = 1

    for loc in range(1, params.locations + 1):
        rng = Mulberry32(derive_location_seed(params.seed, loc))
        plot_num = params.location_start_plot(loc)
        site_design = []

        for rep in range(1, params.replications + 1):
            rep_trts = shuffle(list(treatments), rng)

            blocks = []
            for b in range(1, s + 1):
                block_trts = rep_trts[(b - 1) * k:b * k]
                blocks.append(block_trts)

                for trt in block_trts:
                    field_book.append(FieldBookRow(
                        id=global_id,
                        location=location_label(loc),
                        location_index=loc,
                        plot=plot_num,
                        rep=rep,
                        iblock=b,
                        entry=trt,
                        treatment=treatment_label(trt),
                    ))
                    global_id += 1
                    plot_num += 1

            site_design.append(blocks)
        structure.append(site_design)

    return field_book, structure


def build_relabel_mapping(t: int, seed: int) -> Dict[int, int]:
    """
    Random bijection old treatment id -> new treatment id.

    Examples:
        >>> build_relabel_mapping(6, 7)
        {1: 5, 2: 2, 3: 3, 4: 4, 5: 6, 6: 1}
    """
    new_labels = shuffle(list(range(1, t + 1)), Mulberry32(seed))
    return {old: new for old, new in zip(range(1, t + 1), new_labels)}


def relabel(
    field_book: List[FieldBookRow],
    t: int,
    seed: Optional[int] = None
) -> Tuple[List[FieldBookRow], Dict[int, int]]:
    """
    Re-randomize treatment labels without touching the layout.

    Every row keeps its location, plot, replicate and block; only the
    entry/treatment pair is rewritten through a random permutation of 1..t.
    Block membership patterns, and therefore efficiencies, are unchanged.

    Args:
        field_book: Existing field book (not modified)
        t: Number of treatments
        seed: Permutation seed, drawn at random when None

    Returns:
        (new_field_book, mapping)

    Raises:
        DesignValidationError: If the field book's treatment ids are not 1..t
    """
    is_valid, msg = DesignValidator.validate_field_book_entries((row.entry for row in field_book), t)
    if not is_valid:
        raise DesignValidationError(msg)

    if seed is None:
        seed = random_seed()

    mapping = build_relabel_mapping(t, seed)
    relabeled = [
        replace(row, entry=mapping[row.entry], treatment=treatment_label(mapping[row.entry]))
        for row in field_book
    ]
    return relabeled, mapping


class IBDDesigner:
    """Generates resolvable incomplete block designs and estimates their efficiency"""

    def __init__(
        self,
        t: int,
        k: int,
        r: int,
        locations: int = 1,
        seed: Optional[int] = None
    ):
        """
        Initialize designer.

        Args:
            t: Number of treatments
            k: Block size (must divide t)
            r: Number of replicates
            locations: Number of locations
            seed: Randomization seed; a random seed is drawn when None
        """
        self.t = t
        self.k = k
        self.r = r
        self.locations = locations
        self.seed = seed if seed is not None else random_seed()

        self.result: Optional[IBDResult] = None
        self.relabel_mapping: Optional[Dict[int, int]] = None

    def parameters(self, start_plot: int = DEFAULT_START_PLOT) -> DesignParameters:
        return DesignParameters(
            treatments=self.t,
            block_size=self.k,
            replications=self.r,
            locations=self.locations,
            seed=self.seed,
            start_plot=start_plot,
        )

    def construct(self, start_plot: int = DEFAULT_START_PLOT) -> Tuple[List[FieldBookRow], DesignStructure]:
        """Build field book and nested structure without efficiency analysis"""
        return construct_design(self.parameters(start_plot))

    def generate(self, start_plot: int = DEFAULT_START_PLOT) -> IBDResult:
        """
        Generate the design and compute its efficiency.

        Efficiency is computed on the first location; other locations share
        the same parameters and differ only by randomization.

        Args:
            start_plot: First plot number of location 1

        Returns:
            IBDResult

        Raises:
            DesignValidationError: If the parameters are invalid
        """
        params = self.parameters(start_plot)
        field_book, structure = construct_design(params)

        _, warnings = DesignValidator.check_plot_numbering(self.t, self.r)
        for warning in warnings:
            logger.warning(f"[IBD] {warning}")

        efficiency = compute_design_efficiency(structure[0], self.t, self.k, self.r)

        self.result = IBDResult(
            parameters=params,
            field_book=field_book,
            structure=structure,
            efficiency=efficiency,
            warnings=warnings,
        )
        self.relabel_mapping = None

        logger.info(
            f"[IBD] Generated t={self.t}, k={self.k}, r={self.r}, L={self.locations}, "
            f"seed={self.seed}: {len(field_book)} plots"
        )
        return self.result

    def rerandomize(self, seed: Optional[int] = None) -> List[FieldBookRow]:
        """
        Relabel treatments of the current design in place of the old field book.

        Efficiency values are kept: relabeling preserves which treatments
        share blocks.

        Raises:
            RuntimeError: If no design has been generated yet
        """
        if self.result is None:
            raise RuntimeError("No design generated yet. Call generate() first.")

        field_book, mapping = relabel(self.result.field_book, self.t, seed)
        self.result.field_book = field_book
        self.relabel_mapping = mapping

        logger.info(f"[IBD] Re-randomized treatment labels for {len(field_book)} plots")
        return field_book

    def summary(self) -> Dict[str, object]:
        """Display summary: total units, blocks per replicate, rounded efficiencies"""
        if self.result is None:
            raise RuntimeError("No design generated yet. Call generate() first.")

        params = self.result.parameters
        eff = self.result.efficiency
        return {
            "total_units": params.total_units,
            "blocks_per_replicate": params.blocks_per_replicate,
            "a_efficiency": round(eff.a_efficiency, EFFICIENCY_DISPLAY_PRECISION),
            "d_efficiency": round(eff.d_efficiency, EFFICIENCY_DISPLAY_PRECISION),
            "seed": params.seed,
        }

    def field_map(self) -> List[Dict[str, object]]:
        """
        Field book grouped for map display.

        Returns:
            List of locations, each {"location", "replicates": [{"rep",
            "blocks": [{"iblock", "plots": [{"plot", "entry", "treatment"}]}]}]}
        """
        if self.result is None:
            raise RuntimeError("No design generated yet. Call generate() first.")

        params = self.result.parameters
        grouped: Dict[Tuple[int, int, int], List[Dict[str, object]]] = {}
        for row in self.result.field_book:
            grouped.setdefault((row.location_index, row.rep, row.iblock), []).append(
                {"plot": row.plot, "entry": row.entry, "treatment": row.treatment}
            )

        locations = []
        for loc in range(1, params.locations + 1):
            replicates = []
            for rep in range(1, params.replications + 1):
                blocks = [
                    {"iblock": b, "plots": grouped.get((loc, rep, b), [])}
                    for b in range(1, params.blocks_per_replicate + 1)
                ]
                replicates.append({"rep": rep, "blocks": blocks})
            locations.append({"location": location_label(loc), "replicates": replicates})

        return locations

    def to_dataframe(self) -> pd.DataFrame:
        """Field book as a DataFrame with the exported column headers"""
        if self.result is None:
            raise RuntimeError("No design generated yet. Call generate() first.")
        return field_book_to_dataframe(self.result.field_book)


def field_book_to_dataframe(field_book: List[FieldBookRow]) -> pd.DataFrame:
    """Convert field book rows into a DataFrame with FIELD_BOOK_COLUMNS"""
    return pd.DataFrame([row.to_record() for row in field_book], columns=FIELD_BOOK_COLUMNS)


def field_book_from_records(records: List[Dict[str, object]]) -> List[FieldBookRow]:
    """
    Rebuild FieldBookRow objects from exported records or row dicts.

    Accepts either the exported column headers (ID, Location, ...) or the
    attribute names (id, location, ...).
    """
    rows = []
    for record in records:
        if "ID" in record:
            values = {attr: record[col] for col, attr in zip(FIELD_BOOK_COLUMNS, FIELD_BOOK_ATTRIBUTES)}
        else:
            values = {attr: record[attr] for attr in FIELD_BOOK_ATTRIBUTES}

        location = str(values["location"])
        location_index = record.get("location_index")
        if location_index is None:
            location_index = int(location[len(LOCATION_LABEL_PREFIX):])

        rows.append(FieldBookRow(
            id=int(values["id"]),
            location=location,
            location_index=int(location_index),
            plot=int(values["plot"]),
            rep=int(values["rep"]),
            iblock=int(values["iblock"]),
            entry=int(values["entry"]),
            treatment=str(values["treatment"]),
        ))
    return rows


def row_to_dict(row: FieldBookRow) -> Dict[str, object]:
    """JSON-friendly dict of a field book row"""
    return asdict(row)
