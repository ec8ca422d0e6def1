"""jobreg: metadata registry for applications, commands, and clusters."""

__version__ = "0.1.0"
