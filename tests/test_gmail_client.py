"""
Tests for the Gmail message source.
"""

import base64
import pickle
from unittest.mock import MagicMock, patch

import pytest
from googleapiclient.errors import HttpError

import gmail_client
from gmail_client import GmailClient, load_credentials


class FakeCreds:
    """Picklable stand-in for google.oauth2 credentials."""

    def __init__(self, valid=True, expired=False, refresh_token=None):
        self.valid = valid
        self.expired = expired
        self.refresh_token = refresh_token
        self.refreshed = False

    def refresh(self, request):
        self.refreshed = True
        self.valid = True
        self.expired = False


def http_error(status=500):
    return HttpError(MagicMock(status=status, reason="boom"), b"error")


@pytest.fixture
def service():
    return MagicMock()


class TestLoadCredentials:
    """Test credential loading and caching."""

    def test_valid_cached_credentials(self, tmp_path):
        """Test valid pickled credentials are used as they are."""
        token = tmp_path / "token.pickle"
        token.write_bytes(pickle.dumps(FakeCreds()))
        with patch.object(gmail_client, "InstalledAppFlow") as flow:
            creds = load_credentials(token_file=str(token))
        assert creds.valid
        flow.from_client_secrets_file.assert_not_called()

    def test_expired_credentials_are_refreshed(self, tmp_path):
        """Test expired credentials with a refresh token are refreshed and saved."""
        token = tmp_path / "token.pickle"
        token.write_bytes(pickle.dumps(FakeCreds(valid=False, expired=True, refresh_token="r")))
        with patch.object(gmail_client, "Request"), patch.object(gmail_client, "InstalledAppFlow") as flow:
            creds = load_credentials(token_file=str(token))
        assert creds.refreshed
        flow.from_client_secrets_file.assert_not_called()
        assert pickle.loads(token.read_bytes()).valid

    def test_missing_token_runs_flow(self, tmp_path):
        """Test the installed app flow runs when nothing is cached."""
        token = tmp_path / "token.pickle"
        with patch.object(gmail_client, "InstalledAppFlow") as flow:
            flow.from_client_secrets_file.return_value.run_local_server.return_value = FakeCreds()
            creds = load_credentials(credentials_file="creds.json", token_file=str(token), port=5555)
        flow.from_client_secrets_file.assert_called_once_with("creds.json", gmail_client.SCOPES)
        flow.from_client_secrets_file.return_value.run_local_server.assert_called_once_with(port=5555)
        assert creds.valid
        assert token.exists()


class TestListMessageIds:
    """Test listing message ids."""

    def test_follows_pages(self, service):
        """Test every page is collected."""
        service.users().messages().list().execute.side_effect = [
            {"messages": [{"id": "a"}, {"id": "b"}], "nextPageToken": "t1"},
            {"messages": [{"id": "c"}]},
        ]
        client = GmailClient(service=service)
        assert client.list_message_ids(query="is:unread") == ["a", "b", "c"]

    def test_max_results(self, service):
        """Test the result is capped."""
        service.users().messages().list().execute.side_effect = [
            {"messages": [{"id": "a"}, {"id": "b"}], "nextPageToken": "t1"},
        ]
        client = GmailClient(service=service)
        assert client.list_message_ids(max_results=1) == ["a"]

    def test_empty_inbox(self, service):
        """Test no messages yields an empty list."""
        service.users().messages().list().execute.return_value = {"resultSizeEstimate": 0}
        assert GmailClient(service=service).list_message_ids() == []

    def test_errors_propagate(self, service):
        """Test API errors reach the caller."""
        service.users().messages().list().execute.side_effect = http_error()
        with pytest.raises(HttpError):
            GmailClient(service=service).list_message_ids()


class TestMessages:
    """Test fetching and modifying messages."""

    def test_get_raw_bytes(self, service):
        """Test the raw field is base64url-decoded."""
        raw = b"From: a@example.com\r\n\r\nhi \xc3\xa9"
        service.users().messages().get().execute.return_value = {
            "raw": base64.urlsafe_b64encode(raw).decode("ascii")
        }
        assert GmailClient(service=service).get_raw_bytes("m1") == raw

    def test_get_raw_bytes_without_raw(self, service):
        """Test a missing raw field gives None."""
        service.users().messages().get().execute.return_value = {"id": "m1"}
        assert GmailClient(service=service).get_raw_bytes("m1") is None

    def test_get_message_full(self, service):
        """Test the full format is requested."""
        client = GmailClient(service=service, user_id="me")
        client.get_message_full("m1")
        service.users().messages().get.assert_called_with(userId="me", id="m1", format="full")

    def test_mark_read(self, service):
        """Test UNREAD is removed in one batch call."""
        result = GmailClient(service=service, user_id="me").mark_read(["a", "b"])
        service.users().messages().batchModify.assert_called_once_with(
            userId="me", body={"ids": ["a", "b"], "removeLabelIds": ["UNREAD"]}
        )
        assert result == {"status": "ok", "count": 2}

    def test_mark_read_nothing(self, service):
        """Test an empty batch makes no call."""
        assert GmailClient(service=service).mark_read([]) == {"status": "no-op"}
        service.users().messages().batchModify.assert_not_called()

    def test_mark_read_error(self, service):
        """Test batchModify errors are raised."""
        service.users().messages().batchModify().execute.side_effect = http_error()
        with pytest.raises(HttpError):
            GmailClient(service=service).mark_read(["a"])
