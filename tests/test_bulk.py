"""Unit tests for app.services.bulk: per-account isolation, ordering, timeouts, concurrency."""

import asyncio
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import InternalError
from app.services.banking import BankingServiceError
from app.services.bulk import (
    check_all_accounts_balance,
    check_all_accounts_status,
    load_accounts_snapshot,
    run_bulk,
)


def _accounts(*usernames: str) -> list[SimpleNamespace]:
    return [
        SimpleNamespace(id=i, username=u, name=f"{u} name", status="active")
        for i, u in enumerate(usernames, start=1)
    ]


class TestRunBulk(unittest.TestCase):
    """run_bulk: one result per account in input order; failures stay on their own item."""

    def test_failure_is_isolated_and_order_preserved(self) -> None:
        async def op(account):
            if account.username == "B":
                raise BankingServiceError("Bank session error")
            return {"owner": account.username}

        results = asyncio.run(run_bulk(_accounts("A", "B", "C"), op, concurrency=3))
        self.assertEqual([r.account.username for r in results], ["A", "B", "C"])
        self.assertEqual([r.ok for r in results], [True, False, True])
        self.assertEqual(results[0].payload, {"owner": "A"})
        self.assertEqual(results[1].error, "Bank session error")
        self.assertEqual(results[2].payload, {"owner": "C"})

    def test_order_kept_when_later_items_finish_first(self) -> None:
        delays = {"A": 0.05, "B": 0.02, "C": 0.0}

        async def op(account):
            await asyncio.sleep(delays[account.username])
            return account.username

        results = asyncio.run(run_bulk(_accounts("A", "B", "C"), op, concurrency=3))
        self.assertEqual([r.payload for r in results], ["A", "B", "C"])

    def test_timeout_affects_only_slow_item(self) -> None:
        async def op(account):
            if account.username == "B":
                await asyncio.sleep(1)
            return account.username

        results = asyncio.run(
            run_bulk(_accounts("A", "B", "C"), op, concurrency=3, timeout=0.05)
        )
        self.assertEqual([r.ok for r in results], [True, False, True])
        self.assertIn("timed out", results[1].error)

    def test_timeout_raised_by_op_without_batch_timeout(self) -> None:
        async def op(account):
            if account.username == "B":
                raise asyncio.TimeoutError()
            return account.username

        results = asyncio.run(run_bulk(_accounts("A", "B", "C"), op, concurrency=3))
        self.assertEqual([r.ok for r in results], [True, False, True])
        self.assertEqual(results[1].error, "Operation timed out")

    def test_concurrency_bound_respected(self) -> None:
        in_flight = 0
        peak = 0

        async def op(account):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return account.id

        results = asyncio.run(run_bulk(_accounts("A", "B", "C", "D", "E"), op, concurrency=2))
        self.assertEqual(len(results), 5)
        self.assertLessEqual(peak, 2)

    def test_sequential_when_concurrency_is_one(self) -> None:
        seen: list[str] = []

        async def op(account):
            seen.append(account.username)
            await asyncio.sleep(0)
            return None

        asyncio.run(run_bulk(_accounts("A", "B", "C"), op))
        self.assertEqual(seen, ["A", "B", "C"])

    def test_error_without_message_still_marks_item_failed(self) -> None:
        async def op(account):
            raise RuntimeError()

        results = asyncio.run(run_bulk(_accounts("A"), op))
        self.assertFalse(results[0].ok)
        self.assertEqual(results[0].error, "RuntimeError")

    def test_empty_input(self) -> None:
        async def op(account):
            raise AssertionError("not called")

        self.assertEqual(asyncio.run(run_bulk([], op)), [])


class TestBulkChecks(unittest.TestCase):
    """Status and balance fan-outs map each result onto the response item."""

    def test_status_items(self) -> None:
        banking = MagicMock()

        async def check(account):
            if account.username == "B":
                raise BankingServiceError("Bank session error")
            if account.username == "C":
                return {"success": False, "message": "Session expired"}
            return {"success": True, "message": "Logged in"}

        banking.check_login_status = check
        items = asyncio.run(check_all_accounts_status(_accounts("A", "B", "C"), banking))
        self.assertEqual([i.username for i in items], ["A", "B", "C"])
        self.assertEqual([i.login_status for i in items], ["logged_in", "error", "logged_out"])
        self.assertEqual(items[1].message, "Bank session error")
        self.assertEqual(items[2].message, "Session expired")

    def test_balance_items(self) -> None:
        banking = MagicMock()

        async def balance(account):
            if account.username == "B":
                raise BankingServiceError("Bank session error")
            return {"totalBalance": 100}

        banking.get_balance = balance
        items = asyncio.run(check_all_accounts_balance(_accounts("A", "B"), banking, concurrency=2))
        self.assertEqual(items[0].balance, {"totalBalance": 100})
        self.assertIsNone(items[0].error)
        self.assertIsNone(items[1].balance)
        self.assertEqual(items[1].error, "Bank session error")


class TestLoadAccountsSnapshot(unittest.TestCase):

    def test_store_failure_aborts_batch(self) -> None:
        with patch("app.services.bulk.account_store.list_all", side_effect=SQLAlchemyError("down")):
            with self.assertRaises(InternalError) as ctx:
                load_accounts_snapshot(MagicMock())
        self.assertEqual(ctx.exception.status_code, 500)

    def test_returns_store_listing(self) -> None:
        accounts = _accounts("A", "B")
        with patch("app.services.bulk.account_store.list_all", return_value=accounts):
            self.assertIs(load_accounts_snapshot(MagicMock()), accounts)


if __name__ == "__main__":
    unittest.main()
