"""nutrisprout - nutrition targets, meal programs and progress tracking."""

__version__ = "0.1.0"
