"""Infrastructure: durable asset store, cache service, and storage exceptions."""
