"""Unit tests for app.services.banking: request shape and failure classification."""

import asyncio
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from app.schemas.banking import TransactionHistoryParams
from app.services.banking import BankingClient, BankingServiceError


def _settings() -> MagicMock:
    settings = MagicMock()
    settings.BANKING_SERVICE_URL = "http://bank.local:8081/"
    settings.BANKING_REQUEST_TIMEOUT_SEC = 5.0
    return settings


def _account() -> SimpleNamespace:
    return SimpleNamespace(id=3, username="acc1", password="bank-pass")


def _mock_http(mock_client_cls: MagicMock, post: AsyncMock) -> None:
    instance = MagicMock()
    instance.post = post
    mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=instance)
    mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=None)


def _response(status_code: int = 200, body: object = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    return response


class TestBankingClientRequests(unittest.TestCase):

    @patch("app.services.banking.httpx.AsyncClient")
    def test_balance_posts_credentials(self, mock_client_cls: MagicMock) -> None:
        post = AsyncMock(return_value=_response(body={"totalBalance": 10}))
        _mock_http(mock_client_cls, post)

        body = asyncio.run(BankingClient(_settings()).get_balance(_account()))

        self.assertEqual(body, {"totalBalance": 10})
        post.assert_awaited_once()
        args, kwargs = post.call_args
        self.assertEqual(args[0], "http://bank.local:8081/balance")
        self.assertEqual(kwargs["json"], {"username": "acc1", "password": "bank-pass"})

    @patch("app.services.banking.httpx.AsyncClient")
    def test_history_sends_bank_field_names(self, mock_client_cls: MagicMock) -> None:
        post = AsyncMock(return_value=_response(body={"transactions": []}))
        _mock_http(mock_client_cls, post)
        params = TransactionHistoryParams(
            account_number="0123", from_date="01/03/2024", to_date="10/03/2024"
        )

        asyncio.run(BankingClient(_settings()).get_transaction_history(_account(), params))

        args, kwargs = post.call_args
        self.assertEqual(args[0], "http://bank.local:8081/transactions")
        self.assertEqual(kwargs["json"]["accountNumber"], "0123")
        self.assertEqual(kwargs["json"]["fromDate"], "01/03/2024")
        self.assertEqual(kwargs["json"]["toDate"], "10/03/2024")
        self.assertEqual(kwargs["json"]["username"], "acc1")


class TestBankingClientFailures(unittest.TestCase):

    @patch("app.services.banking.httpx.AsyncClient")
    def test_unreachable_is_unavailable(self, mock_client_cls: MagicMock) -> None:
        _mock_http(mock_client_cls, AsyncMock(side_effect=httpx.ConnectError("refused")))
        with self.assertRaises(BankingServiceError) as ctx:
            asyncio.run(BankingClient(_settings()).login(_account()))
        self.assertTrue(ctx.exception.unavailable)

    @patch("app.services.banking.httpx.AsyncClient")
    def test_timeout_is_unavailable(self, mock_client_cls: MagicMock) -> None:
        _mock_http(mock_client_cls, AsyncMock(side_effect=httpx.ReadTimeout("slow")))
        with self.assertRaises(BankingServiceError) as ctx:
            asyncio.run(BankingClient(_settings()).check_login_status(_account()))
        self.assertTrue(ctx.exception.unavailable)

    @patch("app.services.banking.httpx.AsyncClient")
    def test_non_200_is_error(self, mock_client_cls: MagicMock) -> None:
        _mock_http(mock_client_cls, AsyncMock(return_value=_response(status_code=500)))
        with self.assertRaises(BankingServiceError) as ctx:
            asyncio.run(BankingClient(_settings()).logout(_account()))
        self.assertFalse(ctx.exception.unavailable)
        self.assertIn("500", ctx.exception.message)

    @patch("app.services.banking.httpx.AsyncClient")
    def test_non_object_body_is_error(self, mock_client_cls: MagicMock) -> None:
        _mock_http(mock_client_cls, AsyncMock(return_value=_response(body=[1, 2])))
        with self.assertRaises(BankingServiceError):
            asyncio.run(BankingClient(_settings()).get_balance(_account()))


class TestPing(unittest.TestCase):

    @patch("app.services.banking.httpx.AsyncClient")
    def test_ping_false_when_unreachable(self, mock_client_cls: MagicMock) -> None:
        instance = MagicMock()
        instance.get = AsyncMock(side_effect=httpx.ConnectError("refused"))
        mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=instance)
        mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=None)
        self.assertFalse(asyncio.run(BankingClient(_settings()).ping()))

    @patch("app.services.banking.httpx.AsyncClient")
    def test_ping_true_on_success(self, mock_client_cls: MagicMock) -> None:
        response = MagicMock()
        response.is_success = True
        instance = MagicMock()
        instance.get = AsyncMock(return_value=response)
        mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=instance)
        mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=None)
        self.assertTrue(asyncio.run(BankingClient(_settings()).ping()))


if __name__ == "__main__":
    unittest.main()
