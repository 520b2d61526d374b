"""API layer: REST routes and WebSocket handlers."""
