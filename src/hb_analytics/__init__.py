"""
Header-bidding analytics adapter.

Observes auction lifecycle events, turns them into compact telemetry
records, and delivers them in debounced batches to a collection endpoint:
- Sparse wire records (absent fields are omitted)
- Idle-window batching with a forced flush at auction end
- Fire-and-forget HTTP delivery
"""

__version__ = "0.1.0"
