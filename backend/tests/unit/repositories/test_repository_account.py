# tests/unit/repositories/test_repository_account.py
from __future__ import annotations

import pytest

from mercury.models.role import RoleName
from mercury.models.user import User
from mercury.repositories import AccountRepository
from tests.factories.user import UserFactory


@pytest.fixture()
def repo(session) -> AccountRepository:
    return AccountRepository(session=session)


@pytest.mark.parametrize("field", ["user_name", "email", "phone"])
def test_find_by_identifier_matches_any_column(repo, field):
    user = UserFactory(user_name="alice", email="alice@example.com", phone="111")

    found = repo.find_by_identifier(getattr(user, field))

    assert found is not None
    assert found.id == user.id


def test_find_by_identifier_is_exact_match(repo):
    UserFactory(user_name="alice", email="alice@example.com", phone="111")

    assert repo.find_by_identifier("ali") is None
    assert repo.find_by_identifier("ALICE") is None
    assert repo.find_by_identifier("al%") is None
    assert repo.find_by_identifier("_lice") is None


def test_find_by_identifier_treats_wildcards_literally(repo):
    user = UserFactory(user_name="50%_off")
    UserFactory(user_name="50xyoff")

    assert repo.find_by_identifier("50%_off").id == user.id


def test_find_by_identifier_prefers_lowest_id_on_cross_column_collision(repo):
    first = UserFactory(user_name="222")
    UserFactory(phone="222")

    assert repo.find_by_identifier("222").id == first.id


def test_exists_helpers(repo):
    UserFactory(user_name="bob", email="bob@example.com", phone="333")

    assert repo.exists_by_email("bob@example.com")
    assert repo.exists_by_phone("333")
    assert repo.exists_by_user_name("bob")
    assert not repo.exists_by_email("nobody@example.com")
    assert not repo.exists_by_phone("999")
    assert not repo.exists_by_user_name("nobody")


def test_getters_return_user_with_role(repo):
    user = UserFactory(email="carol@example.com")

    found = repo.get_by_email("carol@example.com")

    assert found.id == user.id
    assert found.role.role_name is RoleName.MEMBER
    assert found.scope == "MEMBER"
    assert repo.get_by_phone(user.phone).id == user.id
    assert repo.get_by_user_name(user.user_name).id == user.id


def test_find_one_rejects_unknown_fields(repo):
    with pytest.raises(ValueError, match="non-filterable"):
        repo.find_one(password_hash="x")


def test_find_one_requires_a_filter(repo):
    with pytest.raises(ValueError):
        repo.find_one()


def test_add_flushes_and_assigns_pk(repo, session):
    user = User(user_name="dave", email="dave@example.com", phone="444", password_hash="h")

    repo.add(user)

    assert user.id is not None
    assert user.scope == ""
    session.rollback()


def test_model_trims_and_rejects_blank_identifiers():
    user = User(user_name="  erin ", email=" erin@example.com", phone="555 ", password_hash="h")

    assert (user.user_name, user.email, user.phone) == ("erin", "erin@example.com", "555")
    with pytest.raises(ValueError):
        User(user_name="   ", email="x@example.com", phone="1", password_hash="h")


def test_repr_never_includes_password_hash():
    user = User(user_name="frank", email="f@example.com", phone="6", password_hash="$2b$secret")

    assert repr(user) == "<User id=None user_name='frank'>"
