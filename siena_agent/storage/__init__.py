"""
Storage for Siena Agent.

JSON persistence of records and the sqlite usage ledger.
"""
