"""Route tests through FastAPI's TestClient, on in-memory SQLite and the local identity provider."""

import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from helpers import make_session, seed_establishment, seed_jammer
from signalsafe.api.deps import get_store
from signalsafe.core.config import get_settings
from signalsafe.core.database import get_db
from signalsafe.main import app
from signalsafe.models import AuthIdentity, Establishment, Jammer, User
from signalsafe.services.identity import LocalIdentityProvider
from signalsafe.services.store import RelationalStore


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        rounds = patch("signalsafe.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)
        self.db = make_session()
        self.addCleanup(self.db.close)
        app.dependency_overrides[get_db] = lambda: self.db
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app, raise_server_exceptions=False)
        self.provider = LocalIdentityProvider(self.db, get_settings())
        self.store = RelationalStore(self.db)

    def account(self, email: str, is_admin: bool = False) -> tuple[str, dict[str, str]]:
        """Create identity + profile; return (user id, auth headers)."""
        identity = self.provider.sign_up(email, "segredo1")
        self.store.insert_user(identity.id, email, user_name=email, is_admin=is_admin)
        session = self.provider.sign_in(email, "segredo1")
        return identity.id, {"Authorization": f"Bearer {session.access_token}"}


class TestSignup(ApiTestCase):
    def test_short_password_creates_nothing(self) -> None:
        resp = self.client.post("/signup", json={"email": "a@b.com", "password": "short"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("mínimo 6 caracteres", resp.json()["error"])
        self.assertEqual(self.db.query(User).count(), 0)
        self.assertEqual(self.db.query(AuthIdentity).count(), 0)

    def test_missing_fields_and_bad_email(self) -> None:
        resp = self.client.post("/signup", json={"email": "a@b.com"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "E-mail e senha são obrigatórios.")
        resp = self.client.post("/signup", json={"email": "a@b", "password": "segredo1"})
        self.assertEqual(resp.json()["error"], "E-mail inválido.")

    def test_undecodable_json_is_plain_invalid_request(self) -> None:
        resp = self.client.post(
            "/signup", content=b"{bad", headers={"Content-Type": "application/json"}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Requisição inválida."})
        self.assertEqual(self.db.query(User).count(), 0)

    def test_success_creates_profile(self) -> None:
        resp = self.client.post("/signup", json={"email": "ana@example.com", "password": "segredo1"})
        self.assertEqual(resp.status_code, 201)
        user_id = resp.json()["userId"]
        user = self.store.get_user(user_id)
        self.assertEqual(user.user_name, "ana@example.com")
        self.assertFalse(user.is_admin)

    def test_duplicate_email_is_conflict(self) -> None:
        body = {"email": "ana@example.com", "password": "segredo1"}
        self.client.post("/signup", json=body)
        resp = self.client.post("/signup", json=body)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"], "E-mail já está cadastrado.")


class TestLoginAndSession(ApiTestCase):
    def test_login_returns_session_and_profile(self) -> None:
        user_id, _ = self.account("ana@example.com", is_admin=True)
        resp = self.client.post("/login", json={"email": "ana@example.com", "password": "segredo1"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["user"]["id"], user_id)
        self.assertTrue(data["user"]["is_admin"])
        token = data["session"]["access_token"]

        resp = self.client.get("/verify-session", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["email"], "ana@example.com")

    def test_wrong_password(self) -> None:
        self.account("ana@example.com")
        resp = self.client.post("/login", json={"email": "ana@example.com", "password": "errada1"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "E-mail ou senha incorretos.")

    def test_verify_session_without_or_with_bad_token(self) -> None:
        resp = self.client.get("/verify-session")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "Token não fornecido.")
        resp = self.client.get("/verify-session", headers={"Authorization": "Bearer nope"})
        self.assertEqual(resp.status_code, 401)


class TestPasswordReset(ApiTestCase):
    def test_forgot_password_is_generic(self) -> None:
        self.account("ana@example.com")
        known = self.client.post("/forgot-password", json={"email": "ana@example.com"})
        unknown = self.client.post("/forgot-password", json={"email": "x@example.com"})
        self.assertEqual(known.status_code, 200)
        self.assertEqual(known.json(), unknown.json())
        resp = self.client.post("/forgot-password", json={"email": "invalido"})
        self.assertEqual(resp.status_code, 400)

    def test_reset_password_validation(self) -> None:
        resp = self.client.post("/reset-password", json={"access_token": "t", "new_password": "123"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("mínimo 6 caracteres", resp.json()["error"])
        resp = self.client.post(
            "/reset-password", json={"access_token": "bad", "new_password": "novasenha"}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Erro ao atualizar senha.")


class TestSelfPathRoutes(ApiTestCase):
    def test_other_user_id_is_forbidden_even_if_unknown(self) -> None:
        owner_id, _ = self.account("ana@example.com")
        _, other_headers = self.account("bruno@example.com")
        for user_id in (owner_id, "nao-existe"):
            for suffix in ("estabelecimentos", "estabelecimentos-completo"):
                resp = self.client.get(f"/user/{user_id}/{suffix}", headers=other_headers)
                self.assertEqual(resp.status_code, 403)

    def test_admin_is_forbidden_on_another_users_path(self) -> None:
        owner_id, _ = self.account("ana@example.com")
        _, admin_headers = self.account("admin@example.com", is_admin=True)
        seed_establishment(self.db, owner_id, "Loja")
        for suffix in ("estabelecimentos", "estabelecimentos-completo"):
            resp = self.client.get(f"/user/{owner_id}/{suffix}", headers=admin_headers)
            self.assertEqual(resp.status_code, 403)
            self.assertNotIn("estabelecimentos", resp.json())

    def test_no_token(self) -> None:
        owner_id, _ = self.account("ana@example.com")
        resp = self.client.get(f"/user/{owner_id}/estabelecimentos")
        self.assertEqual(resp.status_code, 401)

    def test_own_establishments_ordered_by_name(self) -> None:
        owner_id, headers = self.account("ana@example.com")
        seed_establishment(self.db, owner_id, "Zeta")
        seed_establishment(self.db, owner_id, "Alfa")
        resp = self.client.get(f"/user/{owner_id}/estabelecimentos", headers=headers)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual([e["nome"] for e in data["estabelecimentos"]], ["Alfa", "Zeta"])
        self.assertEqual(data["total"], 2)

    def test_complete_listing_nests_jammers(self) -> None:
        owner_id, headers = self.account("ana@example.com")
        zeta = seed_establishment(self.db, owner_id, "Zeta")
        alfa = seed_establishment(self.db, owner_id, "Alfa")
        seed_jammer(self.db, zeta.id)
        seed_jammer(self.db, zeta.id, estado_jammer=True)
        resp = self.client.get(f"/user/{owner_id}/estabelecimentos-completo", headers=headers)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual([e["id"] for e in data["estabelecimentos"]], [alfa.id, zeta.id])
        self.assertEqual(data["estabelecimentos"][0]["total_jammers"], 0)
        self.assertEqual(data["estabelecimentos"][1]["total_jammers"], 2)
        self.assertEqual(data["total_estabelecimentos"], 2)
        self.assertEqual(data["total_jammers"], 2)


class TestOwnershipRoutes(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner_id, self.owner_headers = self.account("ana@example.com")
        _, self.other_headers = self.account("bruno@example.com")
        _, self.admin_headers = self.account("admin@example.com", is_admin=True)
        self.establishment = seed_establishment(self.db, self.owner_id, "Loja")
        seed_jammer(self.db, self.establishment.id, jammer_id=42)

    def test_establishment_jammers(self) -> None:
        path = f"/estabelecimento/{self.establishment.id}/jammers"
        resp = self.client.get(path, headers=self.owner_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["total"], 1)
        self.assertEqual(self.client.get(path, headers=self.other_headers).status_code, 403)
        self.assertEqual(
            self.client.get("/estabelecimento/999/jammers", headers=self.other_headers).status_code,
            404,
        )

    def test_owner_turns_jammer_on_twice(self) -> None:
        for _ in range(2):
            resp = self.client.patch(
                "/jammer/42", json={"estado_jammer": True}, headers=self.owner_headers
            )
            self.assertEqual(resp.status_code, 200)
            self.assertTrue(resp.json()["jammer"]["estado_jammer"])
        self.assertTrue(self.store.get_jammer(42).estado_jammer)

    def test_non_owner_is_forbidden_and_nothing_changes(self) -> None:
        resp = self.client.patch("/jammer/42", json={"estado_jammer": True}, headers=self.other_headers)
        self.assertEqual(resp.status_code, 403)
        self.assertFalse(self.store.get_jammer(42).estado_jammer)

    def test_missing_jammer_is_not_found_for_anyone(self) -> None:
        resp = self.client.patch("/jammer/999", json={"estado_jammer": True}, headers=self.other_headers)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"], "Jammer não encontrado.")

    def test_no_token_does_not_mutate(self) -> None:
        resp = self.client.patch("/jammer/42", json={"estado_jammer": True})
        self.assertEqual(resp.status_code, 401)
        self.assertFalse(self.store.get_jammer(42).estado_jammer)

    def test_no_token_with_malformed_body_is_unauthenticated(self) -> None:
        resp = self.client.patch(
            "/jammer/42", content=b"{bad", headers={"Content-Type": "application/json"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers["WWW-Authenticate"], "Bearer")
        self.assertFalse(self.store.get_jammer(42).estado_jammer)

    def test_malformed_body_names_no_field(self) -> None:
        headers = {**self.owner_headers, "Content-Type": "application/json"}
        resp = self.client.patch("/jammer/42", content=b"{bad", headers=headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Requisição inválida."})
        self.assertFalse(self.store.get_jammer(42).estado_jammer)

    def test_state_is_required_and_must_be_boolean(self) -> None:
        resp = self.client.patch("/jammer/42", json={}, headers=self.owner_headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "estado_jammer é obrigatório.")
        resp = self.client.patch("/jammer/42", json={"estado_jammer": "sim"}, headers=self.owner_headers)
        self.assertEqual(resp.status_code, 400)

    def test_non_integer_id_is_validation_error(self) -> None:
        resp = self.client.patch("/jammer/abc", json={"estado_jammer": True}, headers=self.owner_headers)
        self.assertEqual(resp.status_code, 400)

    def test_admin_bypasses_ownership(self) -> None:
        resp = self.client.patch("/jammer/42", json={"estado_jammer": True}, headers=self.admin_headers)
        self.assertEqual(resp.status_code, 200)


class TestAdminRoutes(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner_id, self.owner_headers = self.account("ana@example.com")
        _, self.admin_headers = self.account("admin@example.com", is_admin=True)

    def test_non_admin_and_anonymous(self) -> None:
        self.assertEqual(self.client.get("/admin/usuarios", headers=self.owner_headers).status_code, 403)
        self.assertEqual(self.client.get("/admin/usuarios").status_code, 401)
        resp = self.client.post(
            "/admin/estabelecimento",
            json={"user_id": self.owner_id, "nome": "Loja", "cep": "01000-000"},
            headers=self.owner_headers,
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.db.query(Establishment).count(), 0)

    def test_anonymous_create_with_malformed_body_is_unauthenticated(self) -> None:
        for path in ("/admin/estabelecimento", "/admin/jammer"):
            resp = self.client.post(
                path, content=b"{bad", headers={"Content-Type": "application/json"}
            )
            self.assertEqual(resp.status_code, 401)
        resp = self.client.post(
            "/admin/jammer",
            content=b"{bad",
            headers={**self.owner_headers, "Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.db.query(Jammer).count(), 0)

    def test_list_users(self) -> None:
        resp = self.client.get("/admin/usuarios", headers=self.admin_headers)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["total"], 2)
        self.assertEqual(data["usuarios"][0]["email"], "admin@example.com")

    def test_create_establishment_and_jammer(self) -> None:
        resp = self.client.post(
            "/admin/estabelecimento",
            json={"user_id": "nao-existe", "nome": "Loja", "cep": "01000-000"},
            headers=self.admin_headers,
        )
        self.assertEqual(resp.status_code, 404)
        resp = self.client.post(
            "/admin/estabelecimento", json={"nome": "Loja"}, headers=self.admin_headers
        )
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post(
            "/admin/estabelecimento",
            json={"user_id": self.owner_id, "nome": "Loja", "cep": "01000-000"},
            headers=self.admin_headers,
        )
        self.assertEqual(resp.status_code, 201)
        establishment_id = resp.json()["estabelecimento"]["id"]
        self.assertIn("ana@example.com", resp.json()["message"])

        resp = self.client.post(
            "/admin/jammer", json={"id_estabelecimento": establishment_id}, headers=self.admin_headers
        )
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertFalse(data["jammer"]["estado_jammer"])
        self.assertEqual(data["estabelecimento"]["users"]["email"], "ana@example.com")

        resp = self.client.post(
            "/admin/jammer", json={"id_estabelecimento": 999}, headers=self.admin_headers
        )
        self.assertEqual(resp.status_code, 404)

    def test_listings_embed_owner(self) -> None:
        establishment = seed_establishment(self.db, self.owner_id, "Loja")
        seed_jammer(self.db, establishment.id)
        data = self.client.get("/admin/estabelecimentos", headers=self.admin_headers).json()
        self.assertEqual(data["total"], 1)
        self.assertEqual(data["estabelecimentos"][0]["users"]["user_name"], "ana@example.com")
        data = self.client.get("/admin/jammers", headers=self.admin_headers).json()
        self.assertEqual(data["total"], 1)
        self.assertEqual(data["jammers"][0]["estabelecimento"]["nome"], "Loja")
        self.assertEqual(data["jammers"][0]["estabelecimento"]["users"]["email"], "ana@example.com")

    def test_delete_establishment_cascades_then_not_found(self) -> None:
        establishment = seed_establishment(self.db, self.owner_id, "Loja")
        establishment_id = establishment.id
        seed_jammer(self.db, establishment_id)
        seed_jammer(self.db, establishment_id)
        resp = self.client.delete(f"/admin/estabelecimento/{establishment_id}", headers=self.admin_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["estabelecimento"]["id"], establishment_id)
        self.assertEqual(self.db.query(Jammer).count(), 0)
        resp = self.client.delete(f"/admin/estabelecimento/{establishment_id}", headers=self.admin_headers)
        self.assertEqual(resp.status_code, 404)

    def test_delete_jammer(self) -> None:
        establishment = seed_establishment(self.db, self.owner_id, "Loja")
        jammer_id = seed_jammer(self.db, establishment.id).id
        resp = self.client.delete(f"/admin/jammer/{jammer_id}", headers=self.admin_headers)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.delete(f"/admin/jammer/{jammer_id}", headers=self.admin_headers)
        self.assertEqual(resp.status_code, 404)


class TestInternalErrors(ApiTestCase):
    def test_unexpected_failure_is_internal_error_without_detail(self) -> None:
        _, headers = self.account("admin@example.com", is_admin=True)
        store = MagicMock()
        store.is_admin.return_value = True
        store.list_users.side_effect = RuntimeError("connection reset by peer")
        app.dependency_overrides[get_store] = lambda: store
        resp = self.client.get("/admin/usuarios", headers=headers)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Erro interno do servidor."})


class TestHealth(ApiTestCase):
    def test_health(self) -> None:
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["status"], "ok")
        self.assertEqual(data["database"], "connected")


if __name__ == "__main__":
    unittest.main()
