"""
Recommendation engine: converts inventory snapshots into a priority-ordered
list of restock / reduce / optimize actions.

Modules
-------
rules  : evaluate_snapshot() — threshold rules for one snapshot, pure.
ranker : generate_inventory_recommendations() + rank_recommendations():
         batch evaluation and stable priority ordering.
"""
