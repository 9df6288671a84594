"""Migration version modules.

Each module in this package represents a database migration and is applied
in module-name order. Modules must define:
    IDENTIFIER: str - Unique identifier, conventionally <ISO-date>_<name>
    STATEMENTS: list[str] - Statements executed one at a time, in order
    DESCRIPTION: str - Optional human-readable description

Example migration (v20260301_add_ratings.py):
    IDENTIFIER = "2026-03-01_add_ratings"
    DESCRIPTION = "Add restaurant ratings"

    STATEMENTS = [
        "CREATE TABLE IF NOT EXISTS ratings (id UUID PRIMARY KEY, stars INT NOT NULL);",
    ]

Statements should be safe to re-run: a migration that fails part-way is
retried from its first statement.
"""
