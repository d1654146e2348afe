"""2D motion planning with potential fields, occupancy grids, D* Lite and probabilistic road maps with Theta*."""

__version__ = "0.1.0"