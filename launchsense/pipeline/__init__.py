"""
LaunchSense Decision Pipeline.

Components:
- validator: Input contract check with field-level error details
- orchestrator: Stage sequence from telemetry to ledgered decision
"""
