"""Vite SEO bootstrap: add SEO tooling and static generation to a Vite project."""

__version__ = "0.1.0"
