"""Render adapter, orbit camera, software renderer and video encoder."""
