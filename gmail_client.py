# gmail_client.py
import base64
import logging
import os
import pickle
from typing import List, Dict, Any, Optional

from google.auth.transport.requests import Request
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

import config

logger = logging.getLogger(__name__)

SCOPES = [
    'https://www.googleapis.com/auth/gmail.modify'
]


def load_credentials(credentials_file: str = config.CREDENTIALS_FILE,
                     token_file: str = config.TOKEN_PICKLE,
                     port: int = 0):
    """Load pickled credentials, refreshing or re-authorizing as needed, and save them back."""
    creds = None
    if os.path.exists(token_file):
        with open(token_file, "rb") as f:
            creds = pickle.load(f)
    if creds and creds.valid:
        return creds
    if creds and creds.expired and creds.refresh_token:
        logger.info("Refreshing expired Gmail credentials")
        creds.refresh(Request())
    else:
        flow = InstalledAppFlow.from_client_secrets_file(credentials_file, SCOPES)
        creds = flow.run_local_server(port=port)
    logger.info("Saving credential file to: %s", token_file)
    with open(token_file, "wb") as f:
        pickle.dump(creds, f)
    return creds


class GmailClient:
    def __init__(self, service=None, user_id: str = config.GMAIL_USER,
                 token_file: str = config.TOKEN_PICKLE):
        if service is None:
            creds = load_credentials(token_file=token_file)
            service = build("gmail", "v1", credentials=creds)
        self.service = service
        self.user_id = user_id

    def list_message_ids(self, query: str = config.GMAIL_QUERY, max_results: int = 5000) -> List[str]:
        """Return list of message ids matching query (empty query returns all)."""
        msgs = []
        messages = self.service.users().messages()
        response = messages.list(userId=self.user_id, q=query, maxResults=500).execute()
        while response:
            if "messages" in response:
                msgs.extend([m["id"] for m in response["messages"]])
            if len(msgs) >= max_results or "nextPageToken" not in response:
                break
            response = messages.list(userId=self.user_id, q=query, pageToken=response["nextPageToken"],
                                     maxResults=500).execute()
        return msgs[:max_results]

    def get_message_raw(self, message_id: str) -> Dict[str, Any]:
        """Get full raw message (MIME) for processing."""
        return self.service.users().messages().get(userId=self.user_id, id=message_id, format='raw').execute()

    def get_message_full(self, message_id: str) -> Dict[str, Any]:
        """Get the message with its MIME tree already split into parts."""
        return self.service.users().messages().get(userId=self.user_id, id=message_id, format='full').execute()

    def get_raw_bytes(self, message_id: str) -> Optional[bytes]:
        """Raw RFC 822 bytes of a message, None if Gmail returned no raw field."""
        raw = self.get_message_raw(message_id).get("raw")
        if not raw:
            return None
        return base64.urlsafe_b64decode(raw.encode("utf-8"))

    def mark_read(self, message_ids: List[str]) -> Dict[str, Any]:
        """Drop the UNREAD label from a batch of messages."""
        if not message_ids:
            return {"status": "no-op"}
        body = {"ids": message_ids, "removeLabelIds": ["UNREAD"]}
        try:
            self.service.users().messages().batchModify(userId=self.user_id, body=body).execute()
        except HttpError as error:
            logger.error("Gmail batchModify error: %s", error)
            raise
        return {"status": "ok", "count": len(message_ids)}
