"""Storm-season statistics over IBTrACS-style track tables."""
