"""
Siena Agent.

A narrative-growing writer agent over Google GenAI.
"""

__version__ = "0.1.0"
