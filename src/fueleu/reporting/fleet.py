"""Fleet compliance position report."""

from typing import Any, Dict, List
import logging

import numpy as np
import pandas as pd

from ..core.engine import ComplianceEngine

logger = logging.getLogger(__name__)

FLEET_COLUMNS = [
    "ship_id",
    "year",
    "compliance_balance",
    "total_banked",
    "total_applied",
    "available_balance",
    "status",
]


class FleetReport:
    """Tabular view of every ship's balance and banking for a year."""

    def __init__(self, engine: ComplianceEngine):
        """Initialize report over an engine."""
        self.engine = engine
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def fleet_positions(self, year: int) -> pd.DataFrame:
        """One row per ship with a compliance record in ``year``, sorted by ship id."""
        rows: List[Dict[str, Any]] = []
        for record in self.engine.adjusted_balances(year):
            bank_record = self.engine.get_bank_record(record.ship_id, year)
            rows.append({
                "ship_id": record.ship_id,
                "year": year,
                "compliance_balance": record.compliance_balance,
                "total_banked": bank_record.total_banked,
                "total_applied": bank_record.total_applied,
                "available_balance": bank_record.available_balance,
            })

        if not rows:
            return pd.DataFrame(columns=FLEET_COLUMNS)

        df = pd.DataFrame(rows)
        cb = df["compliance_balance"].to_numpy()
        df["status"] = np.select([cb > 0, cb < 0], ["surplus", "deficit"], default="compliant")

        self.logger.info(f"Built fleet positions for {year}: {len(df)} ship(s)")
        return df.sort_values("ship_id").reset_index(drop=True)[FLEET_COLUMNS]

    def fleet_summary(self, year: int) -> Dict[str, Any]:
        """Aggregate figures across the fleet."""
        df = self.fleet_positions(year)
        if df.empty:
            return {
                "year": year,
                "ships": 0,
                "total_compliance_balance": 0.0,
                "total_surplus": 0.0,
                "total_deficit": 0.0,
                "total_available_banked": 0.0,
                "ships_in_deficit": 0,
            }

        cb = df["compliance_balance"]
        return {
            "year": year,
            "ships": int(len(df)),
            "total_compliance_balance": float(cb.sum()),
            "total_surplus": float(cb[cb > 0].sum()),
            "total_deficit": float(cb[cb < 0].sum()),
            "total_available_banked": float(df["available_balance"].sum()),
            "ships_in_deficit": int((cb < 0).sum()),
        }
