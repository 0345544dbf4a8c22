"""
Monitoring package.

Modules:
    anomaly — rolling-window z-score anomaly detection for demand series.
"""
