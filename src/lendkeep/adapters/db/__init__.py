"""Database helpers: engine factory, metadata, column types, schema and migrations."""
