"""Building blocks for an i3bar/swaybar status-line generator."""

__version__ = "0.1.0"