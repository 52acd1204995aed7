"""Cravings: dietary-preference-based recipe discovery service."""
