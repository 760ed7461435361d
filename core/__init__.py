"""Quiz session engine: sampling, session state, scoring and pagination."""
