"""File operation engine core: models, message bus, adapters and handlers."""
