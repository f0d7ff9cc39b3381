"""Pantry management tools."""
