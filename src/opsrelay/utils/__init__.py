"""Shared utilities for opsrelay."""
