"""apirunner - run HTTP requests, collections and workflows from the command line."""

__version__ = "0.4.0"
