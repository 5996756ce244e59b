"""Relative Placement recalculation for dance competition finals."""
