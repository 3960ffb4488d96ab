"""Core infrastructure: bootstrap, logging, errors and signals."""
