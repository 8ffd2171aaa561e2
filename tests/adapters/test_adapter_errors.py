from depchain.adapters.errors import SourceParseError


def test_adapter_error_has_message_and_details():
    err = SourceParseError("boom", details={"path": "src/a.ts"})
    assert "boom" in str(err)
    assert err.details["path"] == "src/a.ts"
