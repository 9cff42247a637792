"""GameHound — project tracking for game-development teams.

Users register and log in, keep a list of the projects they own, and
watch progress on a dashboard. Team leads see every project.
"""

__version__ = "0.1.0"
