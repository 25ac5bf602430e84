"""Measurement side: load user benchmark suites and profile their calls."""
