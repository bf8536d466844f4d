"""EcoScope service: settings, logging, services and the HTTP API."""
