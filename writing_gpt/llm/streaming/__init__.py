"""
Streaming functionality for LLM clients.

This module contains:
- SSE line parsing
- Answer accumulation
"""
