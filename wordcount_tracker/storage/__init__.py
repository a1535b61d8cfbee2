"""Storage layer: SQLite connection, schema migrations and the word-count ledger."""
