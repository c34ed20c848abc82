"""bigtextsearcher: keyword filtering for text files too large to load."""

__version__ = "0.1.0"
