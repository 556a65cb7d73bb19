"""Notification fan-out and password reset service for the fellowship directory."""
