"""
Ingestion layer — JSON/CSV parsing of demand series, inventory snapshots,
sale records and products for the CLI.

Submodules:
  loader — file loaders with all-or-nothing row validation
"""
