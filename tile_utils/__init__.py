"""Shared grid, tile and puzzle helpers for the stage modules."""
