"""Core domain package for bigtextsearcher.

Core contains settings, matching, line decoding, and the scan pipeline
without any console or CLI code, keeping the search logic portable.
"""
