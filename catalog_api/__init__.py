"""Product catalog and user account HTTP API backed by a document store."""
