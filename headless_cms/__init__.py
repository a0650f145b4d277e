"""Headless CMS: GraphQL API generated from content models."""
