"""
Inventory analytics engine.

Stateless numerical routines that turn sales history and inventory snapshots
into demand forecasts, price suggestions, anomaly flags and ranked inventory
actions.  Import the operations from their modules::

    from inventory_analytics.forecasting.trend import predict_demand
    from inventory_analytics.pricing.optimizer import optimize_price
    from inventory_analytics.monitoring.anomaly import detect_anomalies
    from inventory_analytics.recommendations.ranker import generate_inventory_recommendations
"""

__version__ = "0.1.0"
