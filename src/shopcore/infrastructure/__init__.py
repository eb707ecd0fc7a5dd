"""Infrastructure layer: persistence, authentication, HTTP API and external services."""
