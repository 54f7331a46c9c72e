"""
LaunchSense Decision Layer.

Components:
- schemas: Decision data models (rules, explanation, recommendations, ledger)
- explanation: Ranked contributing factors with aggregate confidence
- recommendations: Priority-tagged action list
- ledger: Immutable audit record construction
"""
