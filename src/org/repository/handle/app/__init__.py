"""
Handle Registry Application Layer

This package implements the HTTP surface of the handle registry using the aiohttp framework.
It exposes handle resolution as plain HTTP redirects and JSON endpoints; it does not speak
the native handle wire protocol.

Key Components:
- cli.py: Entry point for running the application
- server.py: Web server configuration and middleware setup
- config.py: Configuration management using Pydantic settings
- metrics.py: Metrics client abstraction
- handlers/: Request handlers for resolution and health endpoints

The application uses two middleware layers:
- Statsd middleware for metrics collection
- Sentry middleware for error reporting

It provides the following endpoints:
- Handle redirects (/handle/{prefix}/{suffix})
- Internal API endpoints (/internal/api/*)
- Liveness and readiness probes (/internal/alive, /internal/ready)
"""
