"""Rating-update domain modules."""
