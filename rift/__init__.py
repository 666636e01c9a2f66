"""Mirror a project directory into a destination, honouring ignore rules."""

__version__ = "0.1.0"
