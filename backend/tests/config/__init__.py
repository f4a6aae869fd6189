"""
Test configuration package.

Holds marker registration shared by the whole suite.
"""
