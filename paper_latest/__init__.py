"""paper-latest: fetch, verify and save the newest build of a PaperMC-style project."""
__version__ = "0.2.0"
