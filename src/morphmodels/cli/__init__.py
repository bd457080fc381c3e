"""Command line interface for morphmodels."""
