"""Drill modes. Every module here is scanned by soroban.registry.discover()."""
