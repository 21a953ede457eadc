"""Game domain services: creation, listing and the capacity-gated join.

This package holds the logic imported by HTTP routes, keeping transport
concerns separated from the player-count rules.
"""
