"""Adapters that read native coverage reports."""
