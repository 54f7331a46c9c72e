"""
Exception Hierarchy Tests.
"""

from launchsense.exceptions import (
    ErrorCode,
    InvalidInputError,
    LaunchSenseError,
    LedgerConflictError,
    PipelineError,
    StoreUnavailableError,
)


class TestExceptions:
    def test_all_share_base(self):
        for exc in (
            InvalidInputError({}),
            StoreUnavailableError("fetch_history", "timeout"),
            LedgerConflictError("abc"),
            PipelineError("LEDGER", "boom"),
        ):
            assert isinstance(exc, LaunchSenseError)

    def test_store_unavailable_details(self):
        exc = StoreUnavailableError("fetch_active_rules", "connection refused")
        assert exc.code == ErrorCode.STORE_UNAVAILABLE
        assert exc.to_dict() == {
            "error": "STORE_UNAVAILABLE",
            "message": "Data store unavailable during fetch_active_rules: connection refused",
            "details": {"operation": "fetch_active_rules", "reason": "connection refused"},
        }

    def test_pipeline_error_names_stage(self):
        exc = PipelineError("TEMPORAL", "bad history")
        assert exc.stage == "TEMPORAL"
        assert exc.details == {"stage": "TEMPORAL", "reason": "bad history"}

    def test_invalid_input_carries_field_errors(self):
        details = {"field_errors": {"deaths": ["bad"]}, "form_errors": []}
        assert InvalidInputError(details).to_dict()["details"] == details
