"""Outer surfaces for the engine: REST API and terminal play."""
