"""Core configuration, container and authorization."""
