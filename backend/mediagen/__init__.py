"""mediagen: image and video generation through the Runware inference API."""

__version__ = "0.1.0"
