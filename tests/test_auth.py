import asyncio
from urllib.parse import parse_qs, urlparse

import pytest

from travelbook.exceptions import AuthenticationError, DuplicateEmailError, TravelbookError, ValidationError
from travelbook.schemas.travel_schemas import AdminUserUpdate, ProfileUpdate, UserRole
from travelbook.services.auth_service import hash_password, verify_password


def run(coro):
    return asyncio.run(coro)


def register(ctx, email="anna@example.hu", password="titkos-jelszo", name="Kiss Anna"):
    return run(ctx.auth.register(email, password, name))


class TestPasswords:

    def test_hash_and_verify(self):
        account = hash_password("jelszo123")
        assert account["passwordHash"] != "jelszo123"
        assert verify_password("jelszo123", account)
        assert not verify_password("jelszo124", account)

    def test_salts_differ(self):
        assert hash_password("x")["passwordHash"] != hash_password("x")["passwordHash"]

    def test_account_without_hash(self):
        assert not verify_password("x", {})


class TestRegisterAndLogin:

    def test_register_creates_profile_and_session(self, ctx):
        session = register(ctx, email="  Anna@Example.HU ")
        assert session.user.email == "anna@example.hu"
        assert session.user.role == UserRole.USER
        assert run(ctx.auth.get_current_user(session.session_id)) == session.user

    def test_duplicate_email(self, ctx):
        register(ctx)
        with pytest.raises(DuplicateEmailError) as exc:
            register(ctx, email="ANNA@example.hu")
        assert exc.value.message == "Ez az email cím már regisztrálva van."

    def test_invalid_email(self, ctx):
        with pytest.raises(ValidationError):
            register(ctx, email="anna")

    def test_login(self, ctx):
        register(ctx)
        session = run(ctx.auth.login("anna@example.hu", "titkos-jelszo"))
        assert session.user.name == "Kiss Anna"

    def test_wrong_password(self, ctx):
        register(ctx)
        with pytest.raises(AuthenticationError) as exc:
            run(ctx.auth.login("anna@example.hu", "rossz"))
        assert exc.value.message == "Hibás email cím vagy jelszó."
        with pytest.raises(AuthenticationError):
            run(ctx.auth.login("senki@example.hu", "titkos-jelszo"))

    def test_login_reuses_live_session(self, ctx):
        first = register(ctx)
        again = run(ctx.auth.login("anna@example.hu", "titkos-jelszo", first.session_id))
        assert again.session_id == first.session_id

        other = register(ctx, email="bela@example.hu", name="Béla")
        switched = run(ctx.auth.login("anna@example.hu", "titkos-jelszo", other.session_id))
        assert switched.session_id != other.session_id

    def test_logout_is_tolerant(self, ctx):
        session = register(ctx)
        run(ctx.auth.logout(session.session_id))
        assert run(ctx.auth.get_current_user(session.session_id)) is None
        run(ctx.auth.logout(session.session_id))
        run(ctx.auth.logout(None))

    def test_missing_profile_ends_session(self, ctx):
        session = register(ctx)
        run(ctx.users.delete(session.user.id))
        assert run(ctx.auth.get_current_user(session.session_id)) is None
        assert ctx.sessions.get_session(session.session_id) is None


class TestAccountChanges:

    def test_update_user(self, ctx):
        session = register(ctx)
        user = run(ctx.auth.update_user(session.user.id, ProfileUpdate(name="Kovács Anna", phone="+36301234567")))
        assert (user.name, user.phone) == ("Kovács Anna", "+36301234567")
        assert ctx.store.get_document("accounts", user.id)["name"] == "Kovács Anna"

    def test_update_missing_user(self, ctx):
        with pytest.raises(TravelbookError) as exc:
            run(ctx.auth.update_user("nincs", ProfileUpdate(phone="1")))
        assert exc.value.message == "Nem sikerült frissíteni az adatokat."

    def test_update_password(self, ctx):
        session = register(ctx)
        with pytest.raises(AuthenticationError):
            run(ctx.auth.update_password(session.user.id, "rossz", "uj-jelszo-123"))
        run(ctx.auth.update_password(session.user.id, "titkos-jelszo", "uj-jelszo-123"))
        run(ctx.auth.login("anna@example.hu", "uj-jelszo-123"))

    def test_password_recovery(self, ctx):
        session = register(ctx)
        link = run(ctx.auth.send_password_recovery("anna@example.hu"))
        parsed = urlparse(link)
        assert link.startswith("https://utazz.test/reset-password?")
        params = {k: v[0] for k, v in parse_qs(parsed.query).items()}
        assert params["userId"] == session.user.id

        run(ctx.auth.confirm_password_recovery(params["userId"], params["secret"], "visszaallitott"))
        run(ctx.auth.login("anna@example.hu", "visszaallitott"))
        with pytest.raises(AuthenticationError):
            run(ctx.auth.confirm_password_recovery(params["userId"], params["secret"], "masodszor"))

    def test_recovery_for_unknown_email(self, ctx):
        assert run(ctx.auth.send_password_recovery("senki@example.hu")) is None


class TestUserService:

    def test_listing_and_stats(self, ctx, user, other_user, admin):
        users, total = run(ctx.users.get_all())
        assert total == 3
        admins, total = run(ctx.users.get_all(role=UserRole.ADMIN))
        assert [u.id for u in admins] == [admin.id]
        found, _ = run(ctx.users.get_all(search="béla"))
        assert [u.id for u in found] == [other_user.id]

        stats = run(ctx.users.get_stats())
        assert (stats.total, stats.users, stats.admins, stats.new_this_month) == (3, 2, 1, 3)

    def test_role_and_admin_update(self, ctx, user):
        assert run(ctx.users.update_role(user.id, UserRole.ADMIN)).is_admin
        updated = run(ctx.users.update(user.id, AdminUserUpdate(role=UserRole.USER)))
        assert updated.role == UserRole.USER and updated.name == user.name
