import csv
import io
import logging
from datetime import date
from typing import Iterable, Optional

logger = logging.getLogger("export_service")


def to_csv(records: Iterable) -> Optional[str]:
    """
    CSV text for a list of records (pydantic models or dicts).

    The header is the keys of the first record; later records are written in
    that column order. Returns None when there is nothing to export.
    """
    rows = [r.to_dict(exclude={"version"}) if hasattr(r, "to_dict") else dict(r) for r in records]
    if not rows:
        return None

    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=list(rows[0].keys()),
        extrasaction="ignore",
        restval="",
        lineterminator="\n",
    )
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def export_filename(name: str, today: Optional[date] = None) -> str:
    return f"{name}_{(today or date.today()).isoformat()}.csv"


def export_to_csv(records: Iterable, name: str):
    """(filename, content) or None for an empty collection."""
    content = to_csv(records)
    if content is None:
        logger.info(f"[export] {name}: no data")
        return None
    filename = export_filename(name)
    logger.info(f"[export] {filename} bytes={len(content)}")
    return filename, content
