"""Artificial Analysis source: intelligence index leaderboard as CSV."""

import csv
import io
import logging
from typing import Any

import httpx

from model_catalog.consts import ARTIFICIAL_ANALYSIS_URL
from model_catalog.models.model_catalog import SourceType
from model_catalog.normalization.coercion import to_number
from model_catalog.sources.base_source import BaseSource

logger = logging.getLogger(__name__)


def parse_leaderboard_csv(text: str) -> list[dict[str, Any]]:
    """Parse the leaderboard CSV into row dicts.

    Rows with fewer columns than the header are dropped. ``intelligenceIndex``
    is parsed as a number (0 when invalid) and ``isLabClaimedValue`` as a
    boolean.

    Args:
        text: CSV document with a header row.

    Returns:
        One dict per complete row.
    """
    reader = csv.DictReader(io.StringIO(text.strip()))
    rows: list[dict[str, Any]] = []
    skipped = 0

    for raw_row in reader:
        # DictReader fills missing trailing columns with None
        if any(value is None for key, value in raw_row.items() if key is not None):
            skipped += 1
            continue
        row: dict[str, Any] = {key: value for key, value in raw_row.items() if key is not None}
        if "intelligenceIndex" in row:
            row["intelligenceIndex"] = to_number(row["intelligenceIndex"])
        if "isLabClaimedValue" in row:
            row["isLabClaimedValue"] = row["isLabClaimedValue"].strip().lower() == "true"
        rows.append(row)

    if skipped:
        logger.debug(f"Skipped {skipped} incomplete CSV rows")
    return rows


class ArtificialAnalysisSource(BaseSource):
    """Fetches the Artificial Analysis dataset CSV."""

    source_type = SourceType.ARTIFICIAL_ANALYSIS
    url = ARTIFICIAL_ANALYSIS_URL

    def parse_response(self, response: httpx.Response) -> Any:
        return parse_leaderboard_csv(response.text)
