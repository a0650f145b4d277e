"""Entry and content model services."""
