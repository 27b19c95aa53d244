"""
Core utilities shared across the catalog API: configuration, logging,
middleware, password hashing, claim tokens and the error taxonomy.
"""
