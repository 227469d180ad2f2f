"""Member directory service package."""
