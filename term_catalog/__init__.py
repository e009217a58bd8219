"""
Term discovery and subject fan-out for Banner schedule search pages.
"""
