"""
Demand forecasting.

Modules:
    trend — OLS trend fit, horizon projection, R²-based confidence, and the
            moving-average fallback estimate.
"""
