"""filedeck command-line interface."""
