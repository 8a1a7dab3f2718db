"""Practice planner: scheduling core for dog-sport club practices."""

__version__ = "0.1.0"
