"""
LaunchSense — Decision Intelligence for game launches.

Architecture:
    launchsense/
    ├── schemas/         # Pydantic input/history models (validation contract)
    ├── engine/          # Signals, insights, rules, risk model, confidence,
    │                    # temporal, cohort, counterfactual
    ├── decisions/       # Decision schemas, explanation, recommendations, ledger
    ├── pipeline/        # Input validation + orchestrator (stage sequence)
    ├── store/           # DataStore boundary (in-memory, SQLAlchemy)
    ├── db/              # SQLAlchemy engine and models
    ├── observability/   # Injected metrics recorders
    └── services/        # Read-side aggregation (dashboard)

Module Boundaries:
    - Rules are owned by the rule store — the pipeline only reads them
    - Every model decision produces exactly one immutable ledger entry
    - Every score is bounded: risk in [0, 100], confidence in [0, 1]

Data Flow:
    Telemetry → Validate → Signals + Insights → Rule Check
    → (override) | Risk Model → Confidence → Temporal ∥ Counterfactual
    → Explanation → Recommendations → Ledger

Version: 1.0.0
"""

__version__ = "1.0.0"
