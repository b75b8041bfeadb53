"""Integrator, trajectory generation, reveal animation and parameter session."""
