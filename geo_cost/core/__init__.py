"""
Core modules for the GEO cost estimator.

This package contains the model catalog, frequency tables, selection
rules and the pricing engine.
"""
