"""Shared-expense ledger: split calculation, pairwise balances and debt simplification."""
