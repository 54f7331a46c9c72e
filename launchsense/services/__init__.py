"""
Read-side services over the decision ledger.
"""
