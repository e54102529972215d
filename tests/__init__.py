"""
tests package marker.
"""
