"""Domain value objects for the content search engine."""
