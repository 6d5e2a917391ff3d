"""Credential validation and identity resolution."""
