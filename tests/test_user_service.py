"""Tests for services.user_service.UserService."""

import unittest
from decimal import Decimal

from models.enums import Role
from services.user_service import UserService
from tests.support import STRONG_PASSWORD, dispose_storage, make_storage, user_data
from utils.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from utils.security import verify_password


class UserServiceTestCase(unittest.TestCase):

    def setUp(self) -> None:
        self.storage = make_storage()
        self.users = UserService(self.storage)

    def tearDown(self) -> None:
        dispose_storage(self.storage)


class TestCreateUser(UserServiceTestCase):

    def test_defaults_and_hash(self) -> None:
        user = self.users.create(user_data(1, email="Mixed.Case@Example.com"))
        self.assertEqual(user.email, "mixed.case@example.com")
        self.assertNotEqual(user.password, STRONG_PASSWORD)
        self.assertTrue(verify_password(STRONG_PASSWORD, user.password))
        for name in ("expense_limit", "discount_limit", "point", "balance"):
            self.assertEqual(Decimal(getattr(user, name)), 0)

    def test_code_keeps_its_case(self) -> None:
        self.assertEqual(self.users.create(user_data(1, code="kasir01")).code, "kasir01")

    def test_conflicts_reported_in_order(self) -> None:
        self.users.create(user_data(1))
        cases = (
            (user_data(1), "email", "User with this email already exists"),
            (user_data(2, email="USER1@example.com"), "email", "User with this email already exists"),
            (user_data(2, username="user1"), "username", "Username already taken"),
            (user_data(2, phone="08123456001"), "phone", "Phone number already registered"),
            (user_data(2, code="U001"), "code", "User code already exists"),
        )
        for data, field, message in cases:
            with self.subTest(field=field, data=data["email"]):
                with self.assertRaises(ConflictError) as ctx:
                    self.users.create(data)
                self.assertEqual(ctx.exception.field, field)
                self.assertEqual(ctx.exception.message, message)

    def test_uniqueness_checked_before_password_strength(self) -> None:
        self.users.create(user_data(1))
        with self.assertRaises(ConflictError):
            self.users.create(user_data(2, email="user1@example.com", password="weak"))

    def test_weak_password(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.users.create(user_data(1, password="weakpass"))
        self.assertEqual(ctx.exception.message, "Password does not meet requirements")
        self.assertIn("Password must contain at least one uppercase letter", ctx.exception.details["password"])

    def test_code_too_long(self) -> None:
        with self.assertRaises(ValidationError):
            self.users.create(user_data(1, code="ABCDEFGHIJK"))


class TestUpdateUser(UserServiceTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.user = self.users.create(user_data(1))
        self.other = self.users.create(user_data(2))

    def test_update_ignores_code_and_password(self) -> None:
        original_hash = self.user.password
        updated = self.users.update(self.user.id, {"name": "Renamed", "code": "NEW", "password": "Xx1!xxxxx"})
        self.assertEqual(updated.name, "Renamed")
        self.assertEqual(updated.code, "U001")
        self.assertEqual(updated.password, original_hash)

    def test_update_email_conflict(self) -> None:
        with self.assertRaises(ConflictError) as ctx:
            self.users.update(self.user.id, {"email": "USER2@example.com"})
        self.assertEqual(ctx.exception.field, "email")

    def test_profile_update_is_limited(self) -> None:
        updated = self.users.update_profile(self.user.id, {"address": "Jl. Merdeka 5", "role": Role.OWNER})
        self.assertEqual(updated.address, "Jl. Merdeka 5")
        self.assertEqual(updated.role, Role.ANGGOTA)

    def test_profile_phone_conflict(self) -> None:
        with self.assertRaises(ConflictError) as ctx:
            self.users.update_profile(self.user.id, {"phone": self.other.phone})
        self.assertEqual(ctx.exception.message, "Phone number already registered")

    def test_delete(self) -> None:
        self.users.delete(self.other.id)
        self.assertIsNone(self.users.get_by_id(self.other.id))
        with self.assertRaises(NotFoundError) as ctx:
            self.users.delete(self.other.id)
        self.assertEqual(ctx.exception.message, "User not found")


class TestListAndStats(UserServiceTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.users.create(user_data(1, name="Citra", role=Role.KASIR))
        self.users.create(user_data(2, name="Andi", role=Role.KASIR))
        self.users.create(user_data(3, name="Budi", role=Role.OWNER))
        self.users.create(user_data(4, name="Dewi", role=Role.STAFF_WAREHOUSE))

    def test_list_by_role_sorts_by_name(self) -> None:
        result = self.users.list_by_role(Role.KASIR, {"sort_order": "asc"})
        self.assertEqual([u.name for u in result["data"]], ["Andi", "Citra"])

    def test_list_search_and_role_filter(self) -> None:
        self.assertEqual(self.users.list({"search": "BUDI"})["pagination"]["total"], 1)
        self.assertEqual(self.users.list({"role": Role.KASIR})["pagination"]["total"], 2)
        self.assertEqual(self.users.list({"search": "kasir"})["pagination"]["total"], 0)

    def test_get_by_email_is_case_insensitive(self) -> None:
        self.assertEqual(self.users.get_by_email(" USER3@example.com ").name, "Budi")

    def test_stats(self) -> None:
        stats = self.users.stats()
        self.assertEqual(stats["total"], 4)
        self.assertEqual(stats["admins"], 1)
        self.assertEqual(stats["staff"], 1)
        self.assertEqual(stats["recent"], 4)
        self.assertEqual(stats["byRole"], {"KASIR": 2, "OWNER": 1, "STAFF_WAREHOUSE": 1})


class TestAuthorize(UserServiceTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.root = self.users.create(user_data(1, role=Role.SUPER_ADMIN))
        self.owner = self.users.create(user_data(2, role=Role.OWNER))
        self.cashier = self.users.create(user_data(3, role=Role.KASIR))
        self.member = self.users.create(user_data(4, role=Role.ANGGOTA))

    def test_nobody_deletes_themselves(self) -> None:
        for actor in (self.root, self.owner, self.member):
            with self.subTest(role=actor.role):
                with self.assertRaises(AuthorizationError):
                    self.users.authorize(actor, actor.id, "delete")

    def test_super_admin_may_do_anything_else(self) -> None:
        self.users.authorize(self.root, self.owner.id, "delete")
        self.users.authorize(self.root, self.owner.id, "update", {"role": Role.SUPER_ADMIN})

    def test_only_super_admin_grants_super_admin(self) -> None:
        with self.assertRaises(AuthorizationError):
            self.users.authorize(self.owner, self.cashier.id, "update", {"role": Role.SUPER_ADMIN})
        with self.assertRaises(AuthorizationError):
            UserService.check_role_grant(self.owner, Role.SUPER_ADMIN)
        UserService.check_role_grant(self.owner, Role.KASIR)

    def test_owner_cannot_touch_super_admin(self) -> None:
        with self.assertRaises(AuthorizationError):
            self.users.authorize(self.owner, self.root.id, "read")
        self.users.authorize(self.owner, self.cashier.id, "delete")

    def test_owner_on_missing_target(self) -> None:
        with self.assertRaises(NotFoundError):
            self.users.authorize(self.owner, 999, "read")

    def test_others_only_reach_themselves(self) -> None:
        self.users.authorize(self.member, self.member.id, "read")
        self.users.authorize(self.member, self.member.id, "update", {"name": "New"})
        with self.assertRaises(AuthorizationError):
            self.users.authorize(self.member, self.member.id, "update", {"role": Role.OWNER})
        with self.assertRaises(AuthorizationError):
            self.users.authorize(self.member, self.member.id, "update", {"expense_limit": 100})
        with self.assertRaises(AuthorizationError):
            self.users.authorize(self.member, self.cashier.id, "read")


if __name__ == "__main__":
    unittest.main()
