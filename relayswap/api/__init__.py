"""HTTP quote API."""
