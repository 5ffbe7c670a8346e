"""HTTP API for RackKeeper."""
