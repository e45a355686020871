"""Database metadata — the declarative Base shared by models and migrations."""
