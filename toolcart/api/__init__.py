"""HTTP API for the human operator."""
