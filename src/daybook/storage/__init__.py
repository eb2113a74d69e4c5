"""DuckDB persistence for aggregated trades and daily reports."""
