"""Core infrastructure: configuration, logging, protocols and wiring."""
