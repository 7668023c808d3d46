"""HTTP API for pam-explainer (FastAPI)."""
