"""Adapters that connect the core pipeline to a terminal."""
