"""Compliance status read endpoints."""
