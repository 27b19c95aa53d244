"""Domain entities, validation rules and query-filter construction."""
