"""HTTP API for Patient Registry."""
