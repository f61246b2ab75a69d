"""
logsift - JSON log explorer backed by a relational store.

Ingests newline-delimited JSON logs, infers a table schema from a sample
of records, loads everything into SQLite and lets an operator filter the
result with plain SQL WHERE expressions.
"""

__version__ = "1.0.0"
