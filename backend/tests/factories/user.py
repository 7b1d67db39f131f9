"""Factory Boy definition for :class:`mercury.models.user.User`."""

from __future__ import annotations

import factory

from mercury.infra.security.bcrypt_password_hasher import BcryptPasswordHasher
from mercury.models.user import User
from tests.factories import BaseFactory
from tests.factories.role import RoleFactory

_hasher = BcryptPasswordHasher(rounds=4)


class UserFactory(BaseFactory):
    """
    Build persisted :class:`mercury.models.user.User` instances.

    Notes
    -----
    - ``password`` is a factory parameter; only its bcrypt hash is stored.
    - Users default to the ``MEMBER`` role.
    """

    class Meta:
        model = User

    class Params:
        password = "Passw0rd!"

    id = None  # let autoincrement handle it
    user_name = factory.Sequence(lambda n: f"user{n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    phone = factory.Sequence(lambda n: f"+1555{n:07d}")
    full_name = factory.Faker("name")
    address = factory.Faker("street_address")
    status = False
    password_hash = factory.LazyAttribute(lambda o: _hasher.hash(o.password))
    role = factory.SubFactory(RoleFactory)
