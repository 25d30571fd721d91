"""Configuration, database provisioning, errors, observability and middleware."""
