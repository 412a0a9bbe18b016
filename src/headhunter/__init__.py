"""Headhunter - recruit scouting for Clash Royale clans"""

__version__ = "1.0.0"
