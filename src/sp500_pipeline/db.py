"""MongoDB helpers and bulk upsert utility.

Centralizes creation of Mongo clients and the bulk upsert used by the result
table sink.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

import certifi
from pymongo import MongoClient, UpdateOne
from pymongo.collection import Collection
from pymongo.database import Database

log = logging.getLogger(__name__)


def get_client(uri: str) -> MongoClient:
    """Return a configured PyMongo MongoClient for the provided URI.

    TLS with the certifi CA bundle is enabled for `mongodb+srv://` URIs
    (hosted clusters); plain URIs connect without TLS.

    Args:
        uri: MongoDB connection URI.

    Returns:
        Configured MongoClient instance.
    """
    options: dict[str, Any] = {
        "serverSelectionTimeoutMS": 30000,
        "socketTimeoutMS": 30000,
        "connectTimeoutMS": 30000,
    }
    if uri.startswith("mongodb+srv://"):
        options.update(tls=True, tlsCAFile=certifi.where())
    return MongoClient(uri, **options)


def get_db(
    client: MongoClient[dict[str, Any]],
    db_name: str,
) -> Database[dict[str, Any]]:
    """Return the named Database instance from a MongoClient."""
    return client[db_name]


def bulk_upsert(
    collection: Collection[dict[str, Any]],
    docs: Iterable[dict[str, Any]],
    key_fields: Sequence[str],
    batch_size: int = 1000,
) -> int:
    """Bulk upsert documents using `key_fields` as the selector.

    Documents missing any key field are skipped with a warning.

    Args:
        collection: Target PyMongo collection.
        docs: Iterable of document dictionaries to upsert.
        key_fields: Document keys that together identify a row.
        batch_size: Number of ops per bulk_write call.

    Returns:
        Integer number of documents written.
    """
    ops: list[UpdateOne] = []
    written = 0

    for d in docs:
        if any(k not in d or d[k] is None for k in key_fields):
            log.warning("Skipping document without key %s in %s", key_fields, collection.name)
            continue

        ops.append(
            UpdateOne(
                {k: d[k] for k in key_fields},
                {"$set": d},
                upsert=True,
            )
        )

        if len(ops) >= batch_size:
            collection.bulk_write(ops, ordered=False)
            written += len(ops)
            ops.clear()

    if ops:
        collection.bulk_write(ops, ordered=False)
        written += len(ops)

    return written
