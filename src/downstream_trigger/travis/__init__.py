"""Travis CI integration."""

from downstream_trigger.travis.client import TravisClient

__all__ = ["TravisClient"]
