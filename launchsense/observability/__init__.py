"""
Observability — metrics recorders injected into the decision pipeline.
"""
