"""Domain services: identity providers, relational store, access gate and route operations."""
