import pytest
from sqlalchemy.exc import IntegrityError

from src.core.errors import AuthError, ConflictError, ValidationError


def _register(service, email="ada@example.com", password="secret1", confirm=None, full_name="Ada Lovelace"):
    return service.register(
        email=email,
        full_name=full_name,
        password=password,
        confirm_password=password if confirm is None else confirm,
    )


@pytest.mark.unit
def test_validate_signup_reports_every_violation():
    from src.domain.accounts import validate_signup

    errors = validate_signup("not-an-email", "  ", "abc", "xyz")
    fields = [e["field"] for e in errors]
    assert fields == ["email", "fullName", "password", "confirmPassword"]
    assert errors[2]["message"] == "Password must be at least 6 characters"


@pytest.mark.unit
def test_password_length_boundary(db_session, account_service):
    with pytest.raises(ValidationError) as exc:
        _register(account_service, password="abc12")
    assert exc.value.errors == [{"field": "password", "message": "Password must be at least 6 characters"}]

    user_id = _register(account_service, password="abc123")
    assert isinstance(user_id, int)


@pytest.mark.unit
def test_register_stores_hash_and_normalized_email(db_session, account_service):
    from src.database.db_manager import User

    user_id = _register(account_service, email="  Ada@Example.COM ")
    user = db_session.get(User, user_id)
    assert user.email == "ada@example.com"
    assert user.password_hash != "secret1"
    assert user.check_password("secret1")


@pytest.mark.unit
def test_duplicate_email_is_conflict(db_session, account_service, factories):
    factories.UserFactory(email="taken@example.com")
    db_session.commit()

    with pytest.raises(ConflictError) as exc:
        _register(account_service, email="TAKEN@example.com")
    assert exc.value.status_code == 400
    assert exc.value.message == "Email already in use"


@pytest.mark.unit
def test_integrity_error_on_commit_maps_to_conflict(db_session, account_service, monkeypatch):
    def _raise():
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))

    monkeypatch.setattr(db_session, "commit", _raise)
    with pytest.raises(ConflictError):
        _register(account_service, email="race@example.com")


@pytest.mark.unit
def test_login_returns_token_and_public_user(db_session, account_service, factories):
    user = factories.UserFactory(email="bob@example.com", full_name="Bob", password="hunter22")
    db_session.commit()

    result = account_service.login("BOB@example.com", "hunter22")

    assert result["user"] == {"id": user.id, "email": "bob@example.com", "fullName": "Bob"}
    assert "password_hash" not in result["user"]
    assert account_service.validate_token(result["token"])
    assert account_service.resolve_token(result["token"]).id == user.id


@pytest.mark.unit
def test_login_failure_does_not_reveal_which_part_was_wrong(db_session, account_service, factories):
    factories.UserFactory(email="carol@example.com", password="rightpass")
    db_session.commit()

    with pytest.raises(AuthError) as unknown:
        account_service.login("nobody@example.com", "rightpass")
    with pytest.raises(AuthError) as wrong:
        account_service.login("carol@example.com", "wrongpass")

    assert unknown.value.message == wrong.value.message == "Invalid email or password"
    assert unknown.value.status_code == wrong.value.status_code == 400


@pytest.mark.unit
def test_login_requires_well_formed_input(db_session, account_service):
    with pytest.raises(ValidationError) as exc:
        account_service.login("bad-email", "")
    assert {e["field"] for e in exc.value.errors} == {"email", "password"}


@pytest.mark.unit
def test_resolve_token_for_deleted_user_is_none(db_session, account_service):
    token = account_service.issue_token(987654)
    assert account_service.validate_token(token)
    assert account_service.resolve_token(token) is None
