"""
Anchorpose - Marker observation aggregation for spatial tracking.

This package turns a noisy stream of single-frame fiducial marker poses into
finalized marker poses, using a moving (smoothing) or stationary (outlier
rejecting) completion strategy.
"""

from anchorpose.version import __version__

__all__ = ["__version__"]
