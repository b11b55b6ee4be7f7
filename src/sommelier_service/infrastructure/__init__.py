"""Infrastructure adapters: static catalog, credentials and generation providers."""
