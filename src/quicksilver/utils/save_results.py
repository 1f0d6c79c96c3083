"""
save_results.py – persistence of dispatch results

All result files are written from here so the rest of the package stays free
of side effects. Two formats are supported:

• ``json`` – the response contract: ``{"routes": [...], "unassigned": [...]}``
• ``csv``  – one row per task, with its courier and position in the route
"""

import json
from datetime import datetime
from pathlib import Path

import pandas as pd

from quicksilver.core_types import DispatchSolution
from quicksilver.utils.logging import QuicksilverLogger

logger = QuicksilverLogger.get_logger(__name__)

ROUTE_TABLE_COLUMNS = ["Task_GUID", "Courier_GUID", "Position", "Status"]


def solution_to_dataframe(solution: DispatchSolution) -> pd.DataFrame:
    """Flatten routes and unassigned tasks into a single task table."""
    rows = []
    for route in solution.routes:
        for position, task_guid in enumerate(route.route, start=1):
            rows.append(
                {
                    "Task_GUID": task_guid,
                    "Courier_GUID": route.courier_guid,
                    "Position": position,
                    "Status": "assigned",
                }
            )
    for task_guid in solution.unassigned:
        rows.append(
            {
                "Task_GUID": task_guid,
                "Courier_GUID": None,
                "Position": None,
                "Status": "unassigned",
            }
        )
    df = pd.DataFrame(rows, columns=ROUTE_TABLE_COLUMNS)
    # Keep positions integer even with unassigned (missing) rows
    return df.astype({"Position": "Int64"})


def save_solution(
    solution: DispatchSolution,
    filename: str | Path | None = None,
    results_dir: str | Path = "results",
    format: str = "json",
) -> Path:
    """Save a dispatch solution and return the path written."""
    if format not in ("json", "csv"):
        raise ValueError(f"Unsupported output format '{format}'. Use 'json' or 'csv'.")

    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = Path(results_dir) / f"dispatch_results_{timestamp}.{format}"
    else:
        output_path = Path(filename)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    if format == "json":
        with output_path.open("w") as f:
            json.dump(solution.to_dict(), f, indent=2)
    else:
        solution_to_dataframe(solution).to_csv(output_path, index=False)

    logger.info(f"Results saved to {output_path}")
    return output_path
