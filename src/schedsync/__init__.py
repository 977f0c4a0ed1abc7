"""Schedule auto-ingestion and approval reconciliation."""
