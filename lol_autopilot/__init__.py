"""
League of Legends client automation: auto-accept, auto pick/ban and
Riot Client login.
"""

__version__ = "1.0.0"
