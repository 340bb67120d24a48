"""pctl - Portainer automation for CI/CD pipelines"""

__version__ = "0.1.0"
