"""autorel: publish a package release when its contents changed."""

__version__ = "0.1.0"
