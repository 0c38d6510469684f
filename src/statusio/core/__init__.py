"""Core engine: provider clients, time math, caching, aggregation and classification.

This module is framework-agnostic. It has no dependency on MCP or any server
framework; the MCP tools in ``statusio.server`` are a thin layer over it.
"""
