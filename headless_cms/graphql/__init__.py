"""Headless GraphQL schema generation and execution."""
