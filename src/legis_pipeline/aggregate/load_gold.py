"""Publishing result tables to MongoDB.

Result tables are small and already materialized in pandas. Rows are
validated, then upserted into one collection per table keyed on the table's
natural key, so re-publishing a run replaces rather than duplicates rows.
"""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd
from pymongo import UpdateOne

from legis_pipeline.aggregate.export import TABLES
from legis_pipeline.clean.validate import validate_rows
from legis_pipeline.errors import SchemaError

log = logging.getLogger(__name__)


def publish_table(
    pdf: pd.DataFrame,
    name: str,
    db: Any,
    collection_name: str | None = None,
) -> int:
    """Upsert a result table into MongoDB.

    Args:
        pdf: Result table (columns as written by the pipeline).
        name: Table name, one of `export.TABLES`.
        db: PyMongo Database (or any mapping of collections).
        collection_name: Target collection; defaults to `name`.

    Returns:
        Number of rows upserted.

    Raises:
        SchemaError: if any row fails validation; nothing is written then.
    """
    model, _, key_fields = TABLES[name]
    collection = db[collection_name or name]

    log.info("Publishing %s to collection %s", name, collection_name or name)

    rows, bad = validate_rows(pdf, model)
    if bad:
        raise SchemaError(f"{name}: {bad} of {len(pdf)} rows failed validation")

    if not rows:
        log.warning("No rows to publish for %s", name)
        return 0

    ops = [
        UpdateOne(
            {k: row[k] for k in key_fields},
            {"$set": row},
            upsert=True,
        )
        for row in rows
    ]
    collection.bulk_write(ops, ordered=False)

    log.info("Publish complete for %s: %d rows", name, len(ops))
    return len(ops)
