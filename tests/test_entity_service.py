"""Service-level tests for the reference entities against an in-memory database."""

import unittest

from models.account_number import AccountNumber
from models.enums import Menu, Module, PriceType, Role, SubMenu
from models.member import Member
from services.entities import build_entity_services
from tests.support import dispose_storage, make_storage
from utils.exceptions import ConflictError, NotFoundError, ValidationError


class EntityServiceTestCase(unittest.TestCase):

    def setUp(self) -> None:
        self.storage = make_storage()
        self.services = build_entity_services(self.storage)

    def tearDown(self) -> None:
        dispose_storage(self.storage)


class TestBankService(EntityServiceTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.banks = self.services["banks"]

    def test_create_uppercases_code(self) -> None:
        bank = self.banks.create({"code": "bca", "name": "Bank Central Asia"})
        self.assertIsNotNone(bank.id)
        self.assertEqual(bank.code, "BCA")
        self.assertEqual(self.banks.get_by_code("bca").id, bank.id)

    def test_duplicate_code_conflicts(self) -> None:
        self.banks.create({"code": "BCA", "name": "Bank Central Asia"})
        with self.assertRaises(ConflictError) as ctx:
            self.banks.create({"code": "bca", "name": "Another"})
        self.assertEqual(ctx.exception.message, "Bank with this code already exists")
        self.assertEqual(ctx.exception.details, {"field": "code"})

    def test_duplicate_name_conflicts(self) -> None:
        self.banks.create({"code": "BCA", "name": "Bank Central Asia"})
        with self.assertRaises(ConflictError) as ctx:
            self.banks.create({"code": "BNI", "name": "Bank Central Asia"})
        self.assertEqual(ctx.exception.field, "name")

    def test_conflicting_update_leaves_row_unchanged(self) -> None:
        self.banks.create({"code": "BCA", "name": "Bank Central Asia"})
        other = self.banks.create({"code": "BNI", "name": "Bank Negara Indonesia"})
        with self.assertRaises(ConflictError):
            self.banks.update(other.id, {"code": "BCA"})
        self.assertEqual(self.banks.get_by_id(other.id).code, "BNI")

    def test_update_to_own_values_is_not_a_conflict(self) -> None:
        bank = self.banks.create({"code": "BCA", "name": "Bank Central Asia"})
        updated = self.banks.update(bank.id, {"code": "bca", "name": "Bank Central Asia"})
        self.assertEqual(updated.code, "BCA")

    def test_code_length_is_validated(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.banks.create({"code": "BCAX", "name": "Too long"})
        self.assertEqual(ctx.exception.message, "Bank code must be exactly 3 characters")
        self.assertIn("code", ctx.exception.details)

    def test_missing_rows(self) -> None:
        self.assertIsNone(self.banks.get_by_id(999))
        self.assertIsNone(self.banks.get_by_code("ZZZ"))
        with self.assertRaises(NotFoundError) as ctx:
            self.banks.update(999, {"name": "x"})
        self.assertEqual(ctx.exception.message, "Bank not found")
        with self.assertRaises(NotFoundError):
            self.banks.delete(999)

    def test_delete_blocked_while_referenced(self) -> None:
        bank = self.banks.create({"code": "BCA", "name": "Bank Central Asia"})
        self.storage.new(AccountNumber(number="1234567890", holder_name="Shop", bank_code="BCA"))
        self.storage.save()

        with self.assertRaises(ConflictError) as ctx:
            self.banks.delete(bank.id)
        self.assertEqual(ctx.exception.message, "Cannot delete bank. It is referenced by account numbers.")
        self.assertEqual(ctx.exception.details["count"], 1)
        self.assertIsNotNone(self.banks.get_by_id(bank.id))

        account = self.storage.get_session().query(AccountNumber).one()
        self.storage.delete(account)
        self.storage.save()
        self.banks.delete(bank.id)
        self.assertIsNone(self.banks.get_by_id(bank.id))

    def test_list_search_and_pagination(self) -> None:
        for code, name in (("BCA", "Bank Central Asia"), ("BNI", "Bank Negara Indonesia"),
                           ("BRI", "Bank Rakyat Indonesia"), ("MDR", "Mandiri")):
            self.banks.create({"code": code, "name": name})

        result = self.banks.list({"search": "indonesia", "sort_by": "code", "sort_order": "asc"})
        self.assertEqual([b.code for b in result["data"]], ["BNI", "BRI"])
        self.assertEqual(result["pagination"]["total"], 2)

        page = self.banks.list({"page": "2", "limit": "3", "sort_by": "name", "sort_order": "asc"})
        self.assertEqual([b.code for b in page["data"]], ["MDR"])
        self.assertEqual(page["pagination"], {
            "page": 2, "limit": 3, "total": 4, "totalPages": 2, "hasNext": False, "hasPrev": True,
        })

    def test_search_treats_wildcards_literally(self) -> None:
        self.banks.create({"code": "BCA", "name": "Bank Central Asia"})
        self.assertEqual(self.banks.list({"search": "%"})["pagination"]["total"], 0)

    def test_unknown_sort_field(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.banks.list({"sort_by": "password"})
        self.assertIn("sortBy", ctx.exception.details)

    def test_stats_counts_referenced_banks(self) -> None:
        self.banks.create({"code": "BCA", "name": "Bank Central Asia"})
        self.banks.create({"code": "BNI", "name": "Bank Negara Indonesia"})
        for number in ("111", "222"):
            self.storage.new(AccountNumber(number=number, bank_code="BCA"))
        self.storage.save()

        self.assertEqual(self.banks.stats(), {"total": 2, "withReferences": 1, "withoutReferences": 1})


class TestColorService(EntityServiceTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.colors = self.services["colors"]

    def test_hex_code_is_uppercased(self) -> None:
        color = self.colors.create({"code": "#ff00aa", "name": "Pink"})
        self.assertEqual(color.code, "#FF00AA")

    def test_invalid_hex(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.colors.create({"code": "#GGGGGG", "name": "Nope"})
        self.assertEqual(ctx.exception.message, "Color code must be a valid hex color format (e.g., #FF0000)")

    def test_length_checked_before_format(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.colors.create({"code": "#FFF", "name": "Short"})
        self.assertEqual(ctx.exception.message, "Color code must be exactly 7 characters (e.g., #FF0000)")


class TestCodeLengthRules(EntityServiceTestCase):

    def test_cek_giro_code_is_at_most_seven(self) -> None:
        statuses = self.services["cek_giro_fail_statuses"]
        self.assertEqual(statuses.create({"code": "tlk", "name": "Ditolak"}).code, "TLK")
        with self.assertRaises(ValidationError):
            statuses.create({"code": "TOOLONG1", "name": "Too long"})

    def test_reimbursement_code_is_exactly_seven(self) -> None:
        types = self.services["reimbursement_types"]
        self.assertEqual(types.create({"code": "rmb-001", "name": "Transport"}).code, "RMB-001")
        with self.assertRaises(ValidationError):
            types.create({"code": "RMB", "name": "Short"})


class TestBranchService(EntityServiceTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.branches = self.services["branches"]
        self.main = self.branches.create({
            "code": "jkt", "name": "Jakarta", "address": "Jl. Sudirman 1", "price_type": PriceType.GROSIR,
        })
        self.branches.create({"code": "BDG", "name": "Bandung", "address": "Jl. Asia Afrika 2"})

    def test_price_type_defaults_to_ecer(self) -> None:
        self.assertEqual(self.branches.get_by_code("BDG").price_type, PriceType.ECER)

    def test_filter_and_list_by_price_type(self) -> None:
        grosir = self.branches.list({"price_type": PriceType.GROSIR})
        self.assertEqual([b.code for b in grosir["data"]], ["JKT"])
        ecer = self.branches.list_by_price_type(PriceType.ECER)
        self.assertEqual([b.code for b in ecer["data"]], ["BDG"])

    def test_address_must_be_unique(self) -> None:
        with self.assertRaises(ConflictError) as ctx:
            self.branches.create({"code": "SBY", "name": "Surabaya", "address": "Jl. Sudirman 1"})
        self.assertEqual(ctx.exception.message, "Branch with this address already exists")

    def test_stats(self) -> None:
        self.storage.new(Member(code="M001", name="Budi", branch_code="JKT"))
        self.storage.save()
        stats = self.branches.stats()
        self.assertEqual(stats["total"], 2)
        self.assertEqual(stats["withReferences"], 1)
        self.assertEqual(stats["byPriceType"], {"ECER": 1, "GROSIR": 1})

    def test_delete_blocked_by_members(self) -> None:
        self.storage.new(Member(code="M001", name="Budi", branch_code="JKT"))
        self.storage.save()
        with self.assertRaises(ConflictError) as ctx:
            self.branches.delete(self.main.id)
        self.assertEqual(ctx.exception.message, "Cannot delete branch. It is referenced by members.")


class TestPhoneService(EntityServiceTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.phones = self.services["phones"]
        self.phones.create({"phone": "0811111111", "module": Module.BRANCH, "owner_code": "JKT"})
        self.phones.create({"phone": "0822222222", "module": Module.MEMBER, "owner_code": "JKT"})
        self.phones.create({"phone": "0833333333", "module": Module.BRANCH, "owner_code": "BDG"})

    def test_number_is_unique(self) -> None:
        with self.assertRaises(ConflictError) as ctx:
            self.phones.create({"phone": "0811111111", "module": Module.USER, "owner_code": "U001"})
        self.assertEqual(ctx.exception.field, "phone")

    def test_lookups(self) -> None:
        self.assertEqual(self.phones.get_by_number("0833333333").owner_code, "BDG")
        self.assertIsNone(self.phones.get_by_number("0000"))
        self.assertIsNone(self.phones.get_by_code("JKT"))

        self.assertEqual(len(self.phones.list_by_owner("JKT")), 2)
        only_branch = self.phones.list_by_owner("JKT", Module.BRANCH)
        self.assertEqual([p.phone for p in only_branch], ["0811111111"])

        by_module = self.phones.list_by_module(Module.BRANCH, {"sort_by": "phone", "sort_order": "asc"})
        self.assertEqual([p.phone for p in by_module["data"]], ["0811111111", "0833333333"])

    def test_stats_by_module(self) -> None:
        self.assertEqual(self.phones.stats(), {"total": 3, "byModule": {"BRANCH": 2, "MEMBER": 1}})


class TestUserPermissionService(EntityServiceTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.permissions = self.services["user_permissions"]

    def _grant(self, role=Role.KASIR, menu=Menu.MASTER, sub_menu=SubMenu.BANK, **flags):
        return self.permissions.create({"role": role, "menu": menu, "sub_menu": sub_menu, **flags})

    def test_combination_is_unique(self) -> None:
        self._grant(view=True)
        with self.assertRaises(ConflictError) as ctx:
            self._grant(create=True)
        self.assertEqual(
            ctx.exception.message,
            "User permission with this role, menu, and subMenu combination already exists",
        )
        self.assertEqual(ctx.exception.field, "role,menu,sub_menu")
        # another role may hold the same pair
        self._grant(role=Role.SALES)

    def test_update_into_existing_combination(self) -> None:
        self._grant(sub_menu=SubMenu.BANK)
        other = self._grant(sub_menu=SubMenu.COLOR)
        with self.assertRaises(ConflictError):
            self.permissions.update(other.id, {"sub_menu": SubMenu.BANK})
        self.permissions.update(other.id, {"view": True})
        self.assertTrue(self.permissions.get_by_id(other.id).view)

    def test_bulk_create_skips_existing(self) -> None:
        self._grant(sub_menu=SubMenu.BANK)
        created = self.permissions.bulk_create([
            {"role": Role.KASIR, "menu": Menu.MASTER, "sub_menu": SubMenu.BANK},
            {"role": Role.KASIR, "menu": Menu.MASTER, "sub_menu": SubMenu.BRANCH, "view": True},
        ])
        self.assertEqual([p.sub_menu for p in created], [SubMenu.BRANCH])
        self.assertEqual(self.permissions.stats()["total"], 2)

    def test_permissions_for_role_and_menu(self) -> None:
        self._grant(sub_menu=SubMenu.BRANCH)
        self._grant(sub_menu=SubMenu.BANK)
        self._grant(menu=Menu.SALES, sub_menu=SubMenu.ORDER)
        self._grant(role=Role.OWNER, sub_menu=SubMenu.COLOR)

        found = self.permissions.permissions_for(Role.KASIR, Menu.MASTER)
        self.assertEqual([p.sub_menu for p in found], [SubMenu.BANK, SubMenu.BRANCH])
        self.assertEqual(self.permissions.list_by_role(Role.OWNER)["pagination"]["total"], 1)
        self.assertEqual(self.permissions.list_by_menu(Menu.MASTER)["pagination"]["total"], 3)

    def test_search_matches_enum_text(self) -> None:
        self._grant(sub_menu=SubMenu.BANK)
        self._grant(sub_menu=SubMenu.COLOR)
        result = self.permissions.list({"search": "bank"})
        self.assertEqual([p.sub_menu for p in result["data"]], [SubMenu.BANK])

    def test_defaults_sort_by_id(self) -> None:
        first = self._grant(sub_menu=SubMenu.COLOR)
        second = self._grant(sub_menu=SubMenu.BANK)
        result = self.permissions.list({})
        self.assertEqual([p.id for p in result["data"]], [second.id, first.id])


if __name__ == "__main__":
    unittest.main()
