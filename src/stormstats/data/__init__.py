"""Loading, cleaning, and validation of storm-track tables."""
