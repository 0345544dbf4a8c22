"""
Pricing package.

Modules:
    optimizer — stock-bucket price suggestion with a fixed-elasticity demand
                projection (injectable random source).
    signals   — demand, expiry, competition and seasonality signals.
    dynamic   — multi-factor dynamic pricing built on ``signals``.
"""
