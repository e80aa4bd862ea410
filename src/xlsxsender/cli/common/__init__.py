"""Shared CLI helpers: context, options and error handling."""
