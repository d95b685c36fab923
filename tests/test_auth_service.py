import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from services.auth import AuthService, TokenService, hash_password, verify_password
from services.errors import AuthError, ConflictError, ValidationError

SECRET = "unit-test-secret"


def _service(user_repository) -> AuthService:
    return AuthService(
        None,
        user_repository=user_repository,
        token_service=TokenService(secret_key=SECRET, expire_minutes=60),
    )


def _register(service: AuthService, **overrides):
    fields = {
        "username": "alice",
        "email": "alice@example.com",
        "password": "s3cret!",
        "shop_name": None,
    }
    fields.update(overrides)
    return asyncio.run(service.register(**fields))


def test_register_hashes_password_and_issues_token(user_repository):
    service = _service(user_repository)

    result = _register(service, shop_name="Alice's Attic")

    assert result.user.username == "alice"
    assert result.user.shop_name == "Alice's Attic"
    assert result.user.password_hash != "s3cret!"
    assert verify_password("s3cret!", result.user.password_hash)
    assert result.token


def test_register_normalizes_email_and_defaults_shop_name(user_repository):
    service = _service(user_repository)

    result = _register(service, username="  bob  ", email="  Bob@Example.COM ")

    assert result.user.username == "bob"
    assert result.user.email == "bob@example.com"
    assert result.user.display_shop_name == "bob"


def test_duplicate_email_is_a_conflict_and_first_user_is_untouched(user_repository):
    service = _service(user_repository)
    first = _register(service)

    with pytest.raises(ConflictError) as excinfo:
        _register(service, username="alice2", email="ALICE@example.com", password="another1")

    assert excinfo.value.field == "email"
    assert excinfo.value.message == "Email already exists"
    assert list(user_repository.users) == [first.user.id]
    stored = user_repository.users[first.user.id]
    assert stored.username == "alice"
    assert verify_password("s3cret!", stored.password_hash)


def test_duplicate_username_is_a_conflict(user_repository):
    service = _service(user_repository)
    _register(service)

    with pytest.raises(ConflictError) as excinfo:
        _register(service, email="other@example.com")

    assert excinfo.value.message == "Username already exists"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"password": "12345"}, "Password must be at least 6 characters"),
        ({"username": None}, "Username is required"),
        ({"email": "not-an-email"}, "Please enter a valid email"),
        ({"email": None}, "Email is required"),
    ],
)
def test_register_rejects_invalid_fields(user_repository, overrides, message):
    service = _service(user_repository)

    with pytest.raises(ValidationError) as excinfo:
        _register(service, **overrides)

    assert message in excinfo.value.message
    assert user_repository.users == {}


def test_login_failures_share_one_message(user_repository):
    service = _service(user_repository)
    _register(service)

    with pytest.raises(AuthError) as wrong_password:
        asyncio.run(service.login(email="alice@example.com", password="wrong-password"))
    with pytest.raises(AuthError) as unknown_email:
        asyncio.run(service.login(email="nobody@example.com", password="s3cret!"))

    assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"


def test_login_is_case_insensitive_on_email(user_repository):
    service = _service(user_repository)
    registered = _register(service)

    result = asyncio.run(service.login(email=" ALICE@example.com", password="s3cret!"))

    assert result.user.id == registered.user.id
    assert result.token


def test_registration_token_resolves_to_same_user(user_repository):
    service = _service(user_repository)
    registered = _register(service)

    current = asyncio.run(service.get_current_user(registered.token))

    assert current.id == registered.user.id


def test_verify_token_rejects_missing_malformed_and_foreign_tokens(user_repository):
    service = _service(user_repository)
    _register(service)
    foreign = TokenService(secret_key="someone-else").create_access_token(uuid4())

    for token in (None, "", "not-a-jwt", foreign):
        with pytest.raises(AuthError):
            asyncio.run(service.verify_token(token))


def test_verify_token_rejects_expired_token(user_repository):
    service = _service(user_repository)
    registered = _register(service)
    expired = service.token_service.create_access_token(
        registered.user.id,
        expires_delta=timedelta(seconds=-30),
    )

    with pytest.raises(AuthError) as excinfo:
        asyncio.run(service.verify_token(expired))

    assert excinfo.value.message == "Token has expired"


def test_verify_token_rejects_user_that_no_longer_exists(user_repository):
    service = _service(user_repository)
    registered = _register(service)
    user_repository.users.clear()

    with pytest.raises(AuthError):
        asyncio.run(service.verify_token(registered.token))


def test_password_hashes_are_salted():
    first = hash_password("same-password")
    second = hash_password("same-password")

    assert first != second
    assert verify_password("same-password", first)
    assert verify_password("same-password", second)
    assert not verify_password("same-password", "not-a-bcrypt-hash")
