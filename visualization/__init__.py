"""Visualization utilities for flag arrangements."""
from .display import display_arrangement, save_arrangement_preview, plot_occupancy
