"""Unit tests for signalsafe.services.access: identity resolution and ownership/role checks."""

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

from signalsafe.core.result import Err, ErrorKind, Ok
from signalsafe.schemas.auth import Identity, Principal
from signalsafe.services.access import AccessGate
from signalsafe.services.identity import IdentityProviderError, TokenRejectedError

OWNER = Principal(id="owner-1", email="dono@example.com")
STRANGER = Principal(id="other-2", email="outro@example.com")


def _gate(is_admin: bool = False) -> tuple[AccessGate, MagicMock, MagicMock]:
    provider = MagicMock()
    store = MagicMock()
    store.is_admin.return_value = is_admin
    return AccessGate(provider, store), provider, store


def _establishment(establishment_id: int = 7, user_id: str = OWNER.id) -> SimpleNamespace:
    return SimpleNamespace(id=establishment_id, user_id=user_id, nome="Loja", cep="01000-000")


def _jammer(jammer_id: int = 42, owner_id: str = OWNER.id) -> SimpleNamespace:
    return SimpleNamespace(
        id=jammer_id,
        id_estabelecimento=7,
        estado_jammer=False,
        establishment=_establishment(user_id=owner_id),
    )


class TestResolve(unittest.TestCase):
    """Identity resolution: missing tokens never reach the provider; rejections are 401."""

    def test_missing_token_does_not_call_provider(self) -> None:
        gate, provider, _ = _gate()
        for token in (None, "", "   "):
            result = gate.resolve(token)
            self.assertIsInstance(result, Err)
            self.assertEqual(result.kind, ErrorKind.UNAUTHENTICATED)
        provider.resolve.assert_not_called()

    def test_rejected_token_is_unauthenticated(self) -> None:
        gate, provider, _ = _gate()
        provider.resolve.side_effect = TokenRejectedError("expired", 401)
        result = gate.resolve("abc")
        self.assertEqual(result.kind, ErrorKind.UNAUTHENTICATED)
        provider.resolve.assert_called_once_with("abc")

    def test_valid_token_yields_principal(self) -> None:
        gate, provider, _ = _gate()
        provider.resolve.return_value = Identity(id="owner-1", email="dono@example.com")
        result = gate.resolve("abc")
        self.assertIsInstance(result, Ok)
        self.assertEqual(result.value, OWNER)

    def test_provider_outage_propagates(self) -> None:
        gate, provider, _ = _gate()
        provider.resolve.side_effect = IdentityProviderError("Auth service returned 503", 503)
        with self.assertRaises(IdentityProviderError):
            gate.resolve("abc")


class TestSelfPath(unittest.TestCase):
    def test_own_id_is_allowed_without_admin_lookup(self) -> None:
        gate, _, store = _gate()
        result = gate.authorize_self(OWNER, OWNER.id)
        self.assertIsInstance(result, Ok)
        store.is_admin.assert_not_called()

    def test_other_id_is_forbidden_even_if_unknown(self) -> None:
        gate, _, store = _gate()
        result = gate.authorize_self(STRANGER, "does-not-exist")
        self.assertEqual(result.kind, ErrorKind.FORBIDDEN)
        store.get_user.assert_not_called()

    def test_admin_cannot_address_another_user(self) -> None:
        gate, _, store = _gate(is_admin=True)
        result = gate.authorize_self(STRANGER, OWNER.id)
        self.assertEqual(result.kind, ErrorKind.FORBIDDEN)
        store.is_admin.assert_not_called()


class TestEstablishmentOwnership(unittest.TestCase):
    def test_owner_is_allowed(self) -> None:
        gate, _, store = _gate()
        store.get_establishment.return_value = _establishment()
        result = gate.authorize_establishment(OWNER, 7)
        self.assertIsInstance(result, Ok)
        self.assertEqual(result.value.id, 7)

    def test_missing_establishment_is_not_found(self) -> None:
        gate, _, store = _gate()
        store.get_establishment.return_value = None
        result = gate.authorize_establishment(STRANGER, 7)
        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)
        store.is_admin.assert_not_called()

    def test_non_owner_is_forbidden(self) -> None:
        gate, _, store = _gate()
        store.get_establishment.return_value = _establishment()
        self.assertEqual(gate.authorize_establishment(STRANGER, 7).kind, ErrorKind.FORBIDDEN)


class TestJammerOwnership(unittest.TestCase):
    """Jammer owner is the owner of its establishment (two hops)."""

    def test_transitive_owner_is_allowed(self) -> None:
        gate, _, store = _gate()
        store.get_jammer.return_value = _jammer()
        self.assertIsInstance(gate.authorize_jammer(OWNER, 42), Ok)

    def test_non_owner_is_forbidden(self) -> None:
        gate, _, store = _gate()
        store.get_jammer.return_value = _jammer()
        result = gate.authorize_jammer(STRANGER, 42)
        self.assertEqual(result.kind, ErrorKind.FORBIDDEN)

    def test_not_found_takes_precedence(self) -> None:
        gate, _, store = _gate()
        store.get_jammer.return_value = None
        self.assertEqual(gate.authorize_jammer(STRANGER, 42).kind, ErrorKind.NOT_FOUND)

    def test_admin_bypasses_ownership(self) -> None:
        gate, _, store = _gate(is_admin=True)
        store.get_jammer.return_value = _jammer()
        self.assertIsInstance(gate.authorize_jammer(STRANGER, 42), Ok)


class TestAdminMode(unittest.TestCase):
    def test_non_admin_is_forbidden(self) -> None:
        gate, _, store = _gate(is_admin=False)
        result = gate.authorize_admin(OWNER)
        self.assertEqual(result.kind, ErrorKind.FORBIDDEN)
        store.is_admin.assert_called_once_with(OWNER.id)

    def test_admin_is_allowed(self) -> None:
        gate, _, _ = _gate(is_admin=True)
        self.assertEqual(gate.authorize_admin(OWNER).value, OWNER)


if __name__ == "__main__":
    unittest.main()
