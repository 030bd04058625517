import json
import pytest

from agrimarket.errors import ValidationError
from agrimarket.marketplace import Marketplace
from agrimarket.storage import CURRENT_USER
from conftest import make_settings


def test_admin_login_with_configured_credential(market):
    config = market.config
    admin = market.session.login(config.admin_email, config.admin_password, "admin")

    assert admin is not None
    assert admin.id == "admin-1"
    assert admin.role == "admin"
    assert market.session.has_role("admin")


def test_admin_login_with_wrong_password_fails(market):
    assert market.session.login(market.config.admin_email, "guess", "admin") is None
    assert not market.session.is_authenticated


def test_register_sets_and_persists_session(market, kv):
    user = market.session.register({"name": "Ramesh", "email": "r@example.com", "role": "farmer", "password": "secret"})

    assert market.session.current_user.id == user.id
    assert [u.id for u in market.users.all()] == [user.id]

    session = json.loads(kv.get_item(CURRENT_USER))
    assert session["id"] == user.id
    assert "hashedPassword" not in session


def test_register_requires_email_role_and_name(market):
    with pytest.raises(ValidationError) as exc:
        market.session.register({"email": "x@example.com"})
    assert exc.value.fields == ["role", "name"]
    assert market.users.all() == []


def test_register_rejects_unknown_role(market):
    with pytest.raises(ValidationError):
        market.session.register({"name": "X", "email": "x@example.com", "role": "trader"})


def test_login_matches_email_and_role(market, farmer):
    assert market.session.login(farmer.email, "anything", "buyer") is None
    user = market.session.login(farmer.email, "anything", "farmer")
    assert user.id == farmer.id


def test_login_ignores_password_known_gap(market):
    """The credential check is a stub: a wrong password still logs the user in."""
    market.session.register({"name": "Anita", "email": "a@example.com", "role": "buyer", "password": "right"})
    market.session.logout()

    assert market.session.login("a@example.com", "wrong", "buyer") is not None


def test_verify_passwords_switch(kv):
    market = Marketplace(kv, make_settings(verify_passwords=True))
    market.session.register({"name": "Anita", "email": "a@example.com", "role": "buyer", "password": "right"})
    market.session.logout()

    assert market.session.login("a@example.com", "wrong", "buyer") is None
    assert market.session.login("a@example.com", "right", "buyer") is not None


def test_logout_clears_session_only(market, kv):
    user = market.session.register({"name": "Anita", "email": "a@example.com", "role": "buyer"})
    market.session.logout()

    assert market.session.current_user is None
    assert kv.get_item(CURRENT_USER) is None
    assert [u.id for u in market.users.all()] == [user.id]


def test_session_is_restored_on_startup(kv):
    first = Marketplace(kv, make_settings())
    user = first.session.register({"name": "Anita", "email": "a@example.com", "role": "buyer"})

    second = Marketplace(kv, make_settings())
    assert second.session.current_user.id == user.id


def test_corrupt_session_starts_logged_out(kv):
    kv.set_item(CURRENT_USER, "{oops")
    market = Marketplace(kv, make_settings())
    assert market.session.current_user is None


def test_register_ignores_caller_supplied_hash_and_id(kv):
    market = Marketplace(kv, make_settings(verify_passwords=True))
    injected = market.session.get_password_hash("attacker")
    user = market.session.register({
        "name": "Mallory", "email": "m@example.com", "role": "buyer",
        "hashedPassword": injected, "hashed_password": injected, "id": "chosen-id",
    })
    market.session.logout()

    stored = market.users.get(user.id)
    assert stored.hashed_password is None
    assert user.id != "chosen-id"
    assert market.session.login("m@example.com", "attacker", "buyer") is None


def test_register_keeps_profile_fields(market):
    user = market.session.register({
        "name": "Ramesh", "email": "r@example.com", "role": "farmer",
        "phone": "98200 00000", "aadhaar": "1234 5678 9012", "location": "Pune",
    })
    assert (user.phone, user.aadhaar, user.location) == ("98200 00000", "1234 5678 9012", "Pune")


def test_failed_login_leaves_session_unchanged(market, kv, farmer):
    market.session.login(farmer.email, "", "farmer")
    before = kv.get_item(CURRENT_USER)

    assert market.session.login("nobody@example.com", "", "buyer") is None
    assert market.session.login(market.config.admin_email, "wrong", "admin") is None

    assert market.session.current_user.id == farmer.id
    assert kv.get_item(CURRENT_USER) == before
