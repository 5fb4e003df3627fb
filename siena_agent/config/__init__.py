"""
Agent configuration.
"""
