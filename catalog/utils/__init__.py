"""Small shared helpers: identifier generation and timestamps."""
