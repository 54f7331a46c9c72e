"""
Boundary schemas — telemetry input contract and dashboard views.
"""
