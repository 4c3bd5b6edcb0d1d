"""Credential storage and the authenticated session for the BloodLink API."""
