"""
In-memory search stack for portal content.

This package provides a pure-Python search pipeline:
- analyzers: Tokenizer and stop-word filter for mixed Japanese/Latin text
- inverted_index: Token to document-id postings
- fuzzy: Edit distance helpers for typo-tolerant matching
- matcher: Exact, partial and fuzzy candidate resolution
- filters: Structured metadata filters
- scoring: Weighted multi-field relevance
- ordering: Sorting and pagination
- snippet: Highlight extraction
- suggestions: Type-ahead suggestions
"""
