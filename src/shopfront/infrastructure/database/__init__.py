"""SQLite storage backing the basket snapshot slot."""
