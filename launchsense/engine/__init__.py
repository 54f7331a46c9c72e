"""
LaunchSense Scoring Engine — deterministic decision intelligence.

Components:
- signals: Raw telemetry → per-minute rates and LOW/MEDIUM/HIGH levels
- insights: Dominant qualitative risk pattern from sessions/events
- rules: Priority-ordered rule override check against the rule store
- risk_model: Weighted risk score and GO/ITERATE/KILL label
- confidence: Bounded, weight-aware confidence score
- temporal: Trend, volatility, shock, stability and momentum over history
- cohort: Percentile of the current risk against past decisions
- counterfactual: Regret-minimizing comparison of the three decisions
"""
