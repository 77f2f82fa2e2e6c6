"""Tests for the credential store (UserRepository)."""
import pytest

from storefront.core.errors import (
    DuplicateEmailError,
    InvalidArgument,
    PasswordTooLongError,
    ValidationError,
)
from storefront.models.user import User
from storefront.schemas.user import ProfileUpdate

ROUNDS = 4


class TestRegister:
    def test_register_returns_new_id_and_hashes_password(self, session, user_repo):
        user_id = user_repo.register(session, "Ann", "ann@x.com", "pw123", rounds=ROUNDS)

        assert isinstance(user_id, int) and user_id > 0
        row = session.get(User, user_id)
        assert row.password_hash != "pw123"
        assert row.password_hash.startswith("$2")

    def test_register_trims_name_and_email(self, session, user_repo):
        user_id = user_repo.register(session, "  Ann ", " ann@x.com  ", "pw123", rounds=ROUNDS)

        user = user_repo.get_by_id(session, user_id)
        assert user.name == "Ann"
        assert user.email == "ann@x.com"

    def test_same_email_twice_is_duplicate(self, session, user_repo):
        user_repo.register(session, "Ann", "ann@x.com", "pw123", rounds=ROUNDS)

        with pytest.raises(DuplicateEmailError):
            user_repo.register(session, "Other", "ann@x.com", "other", rounds=ROUNDS)

    def test_email_uniqueness_is_case_sensitive(self, session, user_repo):
        user_repo.register(session, "Ann", "ann@x.com", "pw123", rounds=ROUNDS)
        user_id = user_repo.register(session, "Ann", "ANN@x.com", "pw123", rounds=ROUNDS)
        assert user_id > 0

    @pytest.mark.parametrize(
        "name, email, password",
        [
            ("", "ann@x.com", "pw"),
            ("Ann", "   ", "pw"),
            ("Ann", "ann@x.com", "  "),
            (None, "ann@x.com", "pw"),
        ],
    )
    def test_blank_fields_are_rejected(self, session, user_repo, name, email, password):
        with pytest.raises(ValidationError):
            user_repo.register(session, name, email, password, rounds=ROUNDS)

    def test_password_over_72_bytes_is_rejected(self, session, user_repo):
        # 36 two-byte characters is 72 bytes; one more tips it over
        user_repo.register(session, "Ann", "ann@x.com", "é" * 36, rounds=ROUNDS)

        with pytest.raises(PasswordTooLongError, match="72 bytes"):
            user_repo.register(session, "Bob", "bob@x.com", "é" * 37, rounds=ROUNDS)
        assert user_repo.get_by_email(session, "bob@x.com") is None


class TestAuthenticate:
    def test_correct_password_returns_user_without_hash(self, session, user_repo):
        user_id = user_repo.register(session, "Ann", "ann@x.com", "pw123", rounds=ROUNDS)

        account = user_repo.authenticate(session, " ann@x.com ", "pw123")

        assert account is not None
        assert account.id == user_id
        assert account.email == "ann@x.com"
        assert "password_hash" not in account.model_dump()

    def test_wrong_password_never_matches(self, session, user_repo):
        user_repo.register(session, "Ann", "ann@x.com", "pw123", rounds=ROUNDS)

        assert user_repo.authenticate(session, "ann@x.com", "wrong") is None
        assert user_repo.authenticate(session, "ann@x.com", "") is None

    def test_unknown_email_is_no_match_not_error(self, session, user_repo):
        assert user_repo.authenticate(session, "nobody@x.com", "anything") is None


class TestGetById:
    def test_returns_only_public_fields(self, session, user_repo):
        user_id = user_repo.register(session, "Ann", "ann@x.com", "pw123", rounds=ROUNDS)

        user = user_repo.get_by_id(session, user_id)

        assert user.model_dump() == {"id": user_id, "name": "Ann", "email": "ann@x.com"}

    def test_missing_user_is_none(self, session, user_repo):
        assert user_repo.get_by_id(session, 999) is None

    @pytest.mark.parametrize("bad_id", [0, -1, "abc", 1.5, None, True, "²", 2**63])
    def test_non_positive_integer_id_is_invalid(self, session, user_repo, bad_id):
        with pytest.raises(InvalidArgument):
            user_repo.get_by_id(session, bad_id)

    def test_get_by_email(self, session, user_repo):
        user_id = user_repo.register(session, "Ann", "ann@x.com", "pw123", rounds=ROUNDS)

        assert user_repo.get_by_email(session, "ann@x.com").id == user_id
        assert user_repo.get_by_email(session, "nobody@x.com") is None


class TestUpdateProfile:
    def test_overwrites_every_field_and_blanks_missing_ones(self, session, user_repo):
        user_id = user_repo.register(session, "Ann", "ann@x.com", "pw123", rounds=ROUNDS)
        user_repo.update_profile(
            session,
            user_id,
            ProfileUpdate(name="Ann B", username="annb", bio="hi", location="Oslo", website="a.io"),
        )

        changed = user_repo.update_profile(session, user_id, ProfileUpdate(name="Ann C"))

        assert changed is True
        row = session.get(User, user_id)
        session.refresh(row)
        assert row.name == "Ann C"
        assert row.username == ""
        assert row.bio == ""
        assert row.location == ""
        assert row.website == ""

    def test_unknown_user_is_not_changed(self, session, user_repo):
        assert user_repo.update_profile(session, 42, ProfileUpdate(name="x")) is False


class TestDelete:
    def test_delete_removes_user(self, session, user_repo):
        user_id = user_repo.register(session, "Ann", "ann@x.com", "pw123", rounds=ROUNDS)

        assert user_repo.delete(session, user_id) is True
        assert user_repo.get_by_id(session, user_id) is None
        assert user_repo.delete(session, user_id) is False
