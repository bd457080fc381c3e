"""Implementations of morphmodels CLI commands."""
