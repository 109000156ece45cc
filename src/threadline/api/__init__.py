"""HTTP surface for the data-access operations."""
