"""
MindEase - an empathetic chat assistant backed by an LLM completion service.

The ``mindease.main`` module serves the ``/api/chat`` endpoint; the
``mindease.client`` package provides a terminal chat client for it.
"""

__version__ = "0.1.0"
