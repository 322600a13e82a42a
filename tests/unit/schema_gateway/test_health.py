from schema_gateway.api.health import CheckStatus, StartupState


def test_not_ready_before_any_check():
    state = StartupState()
    assert state.is_ready is False
    assert state.as_dict()["started_at"] is None


def test_success_and_failure_are_recorded():
    state = StartupState()
    state.start()
    state.record_success("database", detail="2024-01-01")
    assert state.is_ready is True

    state.record_failure("database", TimeoutError("timed out"))
    state.complete()

    check = state.checks["database"]
    assert check.status == CheckStatus.FAILED
    assert check.error_type == "TimeoutError"
    payload = state.as_dict()
    assert payload["ready"] is False
    assert payload["checks"]["database"]["detail"] == "timed out"
    assert payload["completed_at"] is not None
