from . import carbon, environment, funfact, health, location, news

__all__ = ["carbon", "environment", "funfact", "health", "location", "news"]
