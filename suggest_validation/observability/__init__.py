"""
Observability: structured logging, validation metrics, Prometheus exposition
and the JSON validation summary.
"""
