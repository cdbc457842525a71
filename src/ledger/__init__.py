"""Money ledger: transaction listing, creation and cashback reconciliation."""
