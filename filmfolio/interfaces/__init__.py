"""Interfaces layer - HTTP presentation over services and workflows."""
