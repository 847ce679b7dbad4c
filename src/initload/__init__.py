"""Initial page load trace context propagation demo server."""
