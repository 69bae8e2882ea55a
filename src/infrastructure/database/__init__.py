"""Database access for the SQL confirmation store."""
