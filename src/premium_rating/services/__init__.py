"""Service layer of the premium rating engine."""
