"""
Field Book Export Functions
Writes generated designs to CSV and multi-sheet Excel files
"""
import pandas as pd
from typing import List, Optional
from config.design_config import FIELD_BOOK_COLUMNS
from core.ibd_designer import IBDResult, field_book_to_dataframe


class FieldBookExporter:
    """Exports incomplete block designs to various formats"""

    def __init__(self) -> None:
        """Initialize exporter with no design"""
        self.result: Optional[IBDResult] = None

    def set_result(self, result: IBDResult) -> None:
        """
        Set design to export

        Args:
            result: Output of IBDDesigner.generate() (possibly re-randomized)
        """
        self.result = result

    def _require_result(self) -> IBDResult:
        if self.result is None:
            raise ValueError("No design to export. Generate a design first.")
        return self.result

    def field_book_frame(self) -> pd.DataFrame:
        """Field book with columns ID, Location, Plot, Rep, IBlock, Entry, Treatment"""
        return field_book_to_dataframe(self._require_result().field_book)

    def field_map_frame(self) -> pd.DataFrame:
        """
        One row per incomplete block.

        Columns: Location, Rep, IBlock, then Unit 1..k holding
        "P<plot>: <entry>" for each plot of the block.
        """
        result = self._require_result()
        k = result.parameters.block_size
        unit_columns = [f"Unit {i}" for i in range(1, k + 1)]

        rows: List[list] = []
        current_key = None
        for row in result.field_book:
            key = (row.location, row.rep, row.iblock)
            if key != current_key:
                rows.append([row.location, row.rep, row.iblock])
                current_key = key
            rows[-1].append(f"P{row.plot}: {row.entry}")

        return pd.DataFrame(rows, columns=["Location", "Rep", "IBlock"] + unit_columns)

    def summary_frame(self) -> pd.DataFrame:
        """Design parameters and efficiencies as a two-column table"""
        result = self._require_result()
        params = result.parameters
        eff = result.efficiency

        summary = [
            ("Treatments (t)", params.treatments),
            ("Block size (k)", params.block_size),
            ("Replications (r)", params.replications),
            ("Locations", params.locations),
            ("Blocks per replicate", params.blocks_per_replicate),
            ("Total units", params.total_units),
            ("Seed", params.seed),
            ("Start plot", params.start_plot),
            ("A-efficiency", eff.a_efficiency),
            ("D-efficiency", eff.d_efficiency),
            ("Eigenvalue solver converged", eff.converged),
        ]
        df = pd.DataFrame(summary, columns=["Parameter", "Value"])
        return df

    def export_csv(self, filepath: str) -> None:
        """
        Export the field book as CSV

        Args:
            filepath: Path where CSV file should be saved
        """
        self.field_book_frame().to_csv(filepath, index=False, columns=FIELD_BOOK_COLUMNS)

    def export_excel(self, filepath: str) -> None:
        """
        Export the design to a multi-sheet Excel file

        Creates sheets for:
        - Field Book (one row per plot)
        - Field Map (one row per incomplete block)
        - Summary (parameters and efficiencies)

        Args:
            filepath: Path where Excel file should be saved
        """
        with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
            self.field_book_frame().to_excel(writer, sheet_name='Field Book', index=False)
            self.field_map_frame().to_excel(writer, sheet_name='Field Map', index=False)
            self.summary_frame().to_excel(writer, sheet_name='Summary', index=False)
