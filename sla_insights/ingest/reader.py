"""
Raw CSV source reader for SLA Insights.

Reads the state and insight extracts into string-keyed rows. No typing is done
here; that is the normalizer's job.
"""

from pathlib import Path

import pandas as pd
import structlog

logger = structlog.get_logger()


def read_rows(csv_path: str | Path) -> list[dict[str, str]]:
    """
    Load a CSV with a header row as a list of string rows.

    Every cell is kept as text; empty cells become empty strings. A file with
    no content at all yields no rows.

    Args:
        csv_path: Path to the CSV file

    Returns:
        List of dicts keyed by column name

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        logger.warning("csv_empty", path=str(path))
        return []
    df.columns = [str(c).strip() for c in df.columns]

    rows = df.to_dict(orient="records")
    logger.debug("csv_rows_read", path=str(path), rows=len(rows))
    return rows
