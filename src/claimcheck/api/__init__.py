"""HTTP API for Claimcheck."""
