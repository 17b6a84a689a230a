"""mvp-gen - scaffold new projects from declarative templates."""

__version__ = "1.0.0"
