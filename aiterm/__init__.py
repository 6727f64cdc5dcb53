# aiterm: retrieval-augmented personas in the terminal.

__version__ = "0.3.0"
