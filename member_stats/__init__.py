"""
Member statistics service.

Serves and maintains member profile statistics: current track stats,
rating history, skills and rating distributions.
"""
__version__ = "1.0.0"
