"""Rivet - LLM-written commit messages and pull requests, refined interactively."""

__version__ = "0.3.0"
