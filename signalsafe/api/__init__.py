"""HTTP API: routers, dependencies and result-to-response mapping."""
