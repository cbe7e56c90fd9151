"""HTTP surface for the navigation service."""
