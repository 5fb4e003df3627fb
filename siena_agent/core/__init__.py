"""
Core modules for Siena Agent.

This package contains the pure logic: cost estimation, token counting,
thinking shapes, the semantic data model, prompt synthesis, persistable
records and the budget guard.
"""
