"""Shared errors, logging and constants for filedeck."""
