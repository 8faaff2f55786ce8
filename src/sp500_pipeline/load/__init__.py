"""Result table sinks (MongoDB collections and CSV files)."""
