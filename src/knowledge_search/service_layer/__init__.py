"""Service layer exposing the search engine to application callers."""
