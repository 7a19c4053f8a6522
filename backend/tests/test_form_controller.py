import pytest
from fastapi.testclient import TestClient

from audit_form.dependencies import get_mail_sender, get_settings
from audit_form.lib.api_client import ApiSubmitter
from audit_form.lib.form_controller import (
    COUNTRY_CODES,
    DEFAULT_COUNTRY_CODE,
    AuditFormController,
    default_values,
    local_submitter,
)
from audit_form.lib.schemas import (
    FAILURE_MESSAGE,
    DeliveryFailure,
    FieldError,
    SubmitSuccess,
    ValidationFailure,
)
from audit_form.main import app
from fakes import VALID, FakeRelay, make_settings


class StubSubmitter:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def __call__(self, values):
        self.calls.append(values)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _filled(submitter):
    form = AuditFormController(submitter)
    for name, value in VALID.items():
        form.change(name, value)
    return form


def test_defaults():
    form = AuditFormController(StubSubmitter(SubmitSuccess()))
    assert form.values == default_values()
    assert form.values["countryCode"] == DEFAULT_COUNTRY_CODE == "+61"
    assert [c["code"] for c in COUNTRY_CODES] == ["+61", "+92", "+1", "+44", "+91"]
    assert form.pending is False


def test_success_resets_fields():
    stub = StubSubmitter(SubmitSuccess())
    form = _filled(stub)
    form.select_country_code("+44")

    result = form.submit()

    assert isinstance(result, SubmitSuccess)
    assert stub.calls == [{**VALID, "countryCode": "+44"}]
    assert form.values == default_values()
    assert form.errors == {}
    assert form.pending is False
    assert form.notifications[-1].kind == "success"
    assert form.notifications[-1].duration_ms == 5000


def test_validation_failure_keeps_values_and_maps_errors():
    stub = StubSubmitter(ValidationFailure(errors=[
        FieldError(field="name", message="first"),
        FieldError(field="email", message="Invalid email address"),
        FieldError(field="name", message="second"),
    ]))
    form = _filled(stub)

    form.submit()

    assert form.values == VALID
    assert form.errors == {"name": "second", "email": "Invalid email address"}
    assert form.notifications[-1].kind == "error"
    assert form.notifications[-1].message == "Validation error"
    assert form.pending is False


def test_generic_failure_keeps_values_without_field_errors():
    form = _filled(StubSubmitter(DeliveryFailure()))
    form.submit()
    assert form.values == VALID
    assert form.errors == {}
    assert form.notifications[-1].message == FAILURE_MESSAGE


def test_submitter_exception_is_generic_failure():
    form = _filled(StubSubmitter(RuntimeError("boom")))
    result = form.submit()
    assert isinstance(result, DeliveryFailure)
    assert form.pending is False
    assert form.notifications[-1].kind == "error"


def test_submit_clears_previous_errors():
    form = _filled(StubSubmitter(SubmitSuccess()))
    form.errors = {"phone": "Phone number must be at least 10 digits"}
    form.submit()
    assert form.errors == {}


def test_no_duplicate_submission_while_pending():
    stub = StubSubmitter(SubmitSuccess())
    form = _filled(stub)
    form.pending = True
    assert form.submit() is None
    assert stub.calls == []


def test_reentrant_submit_is_ignored():
    inner = []

    def submitter(values):
        inner.append(form.submit())
        return SubmitSuccess()

    form = _filled(submitter)
    form.submit()
    assert inner == [None]


def test_typing_clears_field_error():
    form = AuditFormController(StubSubmitter(SubmitSuccess()))
    form.errors = {"email": "Invalid email address", "name": "Name must be at least 2 characters"}
    form.change("email", "a@b.com")
    assert form.field_error("email") is None
    assert form.field_error("name") == "Name must be at least 2 characters"


def test_unknown_field_rejected():
    form = AuditFormController(StubSubmitter(SubmitSuccess()))
    with pytest.raises(KeyError):
        form.change("fax", "123")


def test_dropdown():
    form = AuditFormController(StubSubmitter(SubmitSuccess()))
    form.toggle_dropdown()
    assert form.dropdown_open is True
    form.select_country_code("+92")
    assert form.dropdown_open is False
    assert form.values["countryCode"] == "+92"
    form.toggle_dropdown()
    form.close_dropdown()
    assert form.dropdown_open is False


def test_local_submitter_end_to_end():
    relay = FakeRelay()
    form = _filled(local_submitter(make_settings(), send=relay))
    form.change("name", "A")
    form.submit()
    assert form.errors == {"name": "Name must be at least 2 characters"}
    assert relay.sent == []

    form.change("name", "Al")
    form.submit()
    assert len(relay.sent) == 1
    assert form.values == default_values()


def test_api_submitter_over_http():
    relay = FakeRelay()
    settings = make_settings()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_mail_sender] = lambda: relay
    try:
        form = _filled(ApiSubmitter(TestClient(app)))
        form.change("phone", "123")
        result = form.submit()
        assert isinstance(result, ValidationFailure)
        assert form.errors == {"phone": "Phone number must be at least 10 digits"}

        form.change("phone", "1234567890")
        assert isinstance(form.submit(), SubmitSuccess)
        assert len(relay.sent) == 1

        relay.error = TimeoutError()
        fresh_form = _filled(ApiSubmitter(TestClient(app)))
        assert isinstance(fresh_form.submit(), DeliveryFailure)
    finally:
        app.dependency_overrides.clear()


def test_api_submitter_non_result_body():
    client = TestClient(app)
    submitter = ApiSubmitter(client, path="/health")
    assert isinstance(submitter(VALID), DeliveryFailure)
