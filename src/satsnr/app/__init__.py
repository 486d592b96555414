"""Application package for satsnr.

Contains the host loop that feeds and presents the SNR view.
"""

from . import live_view

__all__ = ["live_view"]
