"""Transaction ingestion.

Reads year files into validated `TransactionSet` objects: amounts coerced to
numbers, types lower-cased, rows failing coercion dropped.
"""
