"""Inbound webhook endpoint."""
