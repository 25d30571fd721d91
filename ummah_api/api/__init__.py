"""HTTP layer: request schemas and routers."""
