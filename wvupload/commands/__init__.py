"""Worldview Upload commands."""
