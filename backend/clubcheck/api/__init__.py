"""HTTP surface over the entitlement core."""
