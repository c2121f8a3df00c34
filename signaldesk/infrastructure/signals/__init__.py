"""Adapters for the signals bounded context: storage and AI providers."""
