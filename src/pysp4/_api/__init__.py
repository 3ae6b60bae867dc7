"""Command operations and outer framing for SP4 devices."""
