"""
Storage layer: schema inference, marshalling and the SQLite store.
"""

from logsift.database.db import LogDatabase
from logsift.database.schema import InferredSchema, SchemaBuilder, infer_schema

__all__ = ["LogDatabase", "InferredSchema", "SchemaBuilder", "infer_schema"]
