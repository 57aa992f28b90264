"""Database schema definition."""

import sqlite3

SCHEMA_SQL = """
-- Import session log
CREATE TABLE IF NOT EXISTS import_sessions (
    id INTEGER PRIMARY KEY,
    source_root TEXT NOT NULL,
    started_at_unix REAL NOT NULL,
    started_at INTEGER NOT NULL,
    completed_at_unix REAL,
    completed_at INTEGER,
    status TEXT NOT NULL,
    error_message TEXT,
    files_seen INTEGER DEFAULT 0,
    test_days_added INTEGER DEFAULT 0,
    runs_added INTEGER DEFAULT 0,
    setups_added INTEGER DEFAULT 0,
    files_skipped INTEGER DEFAULT 0
);

-- Test days, keyed by normalized folder name
CREATE TABLE IF NOT EXISTS test_days (
    key TEXT PRIMARY KEY,
    position INTEGER NOT NULL,
    date TEXT NOT NULL,
    venue TEXT NOT NULL,
    run_count INTEGER NOT NULL DEFAULT 0,
    notes TEXT
);

-- Runs, keyed by the relative path of the telemetry file
CREATE TABLE IF NOT EXISTS runs (
    key TEXT PRIMARY KEY,
    position INTEGER NOT NULL,
    test_day_key TEXT NOT NULL,
    run_number INTEGER NOT NULL,
    venue TEXT NOT NULL,
    source_path TEXT NOT NULL,
    size INTEGER NOT NULL,
    modified_at_unix REAL NOT NULL,
    drivers_json TEXT NOT NULL,
    notes TEXT,
    tags_json TEXT NOT NULL
);

-- Setup snapshots, keyed by file name
CREATE TABLE IF NOT EXISTS setups (
    key TEXT PRIMARY KEY,
    position INTEGER NOT NULL,
    setup_id TEXT NOT NULL,
    name TEXT NOT NULL,
    document_json TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS tire_sets (
    id TEXT PRIMARY KEY,
    position INTEGER NOT NULL,
    compound TEXT,
    size TEXT,
    notes TEXT
);

CREATE INDEX IF NOT EXISTS idx_runs_test_day ON runs(test_day_key);
CREATE INDEX IF NOT EXISTS idx_import_sessions_started ON import_sessions(started_at_unix);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes if they don't exist."""
    conn.executescript(SCHEMA_SQL)
    conn.commit()
