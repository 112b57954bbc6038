"""Test-framework integration for disposable containers."""
