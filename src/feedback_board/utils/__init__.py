"""Utility helpers for the feedback board."""
