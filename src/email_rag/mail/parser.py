"""Turn Outlook .msg files and JSON exports into EmailRecord objects."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from email.utils import parseaddr
from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup
from dateutil import parser as date_parser

from email_rag.exceptions import MailParseError
from email_rag.mail.models import Attachment, EmailAddress, EmailRecord

logger = logging.getLogger(__name__)


def parse_msg_file(path: str | Path) -> EmailRecord:
    """Read an Outlook .msg file with ``extract_msg``.

    Only metadata and text are read; attachment payloads are ignored.
    """
    path = Path(path)
    if not path.exists():
        raise MailParseError(f"MSG file not found: {path}")
    try:
        import extract_msg
    except ImportError:
        raise ImportError(
            "extract-msg is required for parse_msg_file. "
            "Install with: pip install extract-msg"
        )

    try:
        with extract_msg.openMsg(str(path)) as msg:
            html = getattr(msg, "htmlBody", None) or b""
            if isinstance(html, bytes):
                html = html.decode("utf-8", errors="replace")
            return EmailRecord(
                subject=(msg.subject or "").strip(),
                sender=_parse_sender(msg.sender or "", getattr(msg, "senderEmail", None)),
                to=_split_recipients(msg.to or ""),
                cc=_split_recipients(msg.cc or ""),
                sent_date=_coerce_date(msg.date),
                received_date=_coerce_date(getattr(msg, "receivedTime", None)),
                attachments=[
                    Attachment(file_name=name)
                    for name in (
                        str(a.longFilename or a.shortFilename or "")
                        for a in (msg.attachments or [])
                    )
                    if name
                ],
                body_text=msg.body or "",
                html_body=html,
                source_path=str(path),
                message_id=(getattr(msg, "messageId", None) or "").strip(),
            )
    except MailParseError:
        raise
    except Exception as e:
        raise MailParseError(f"Failed to parse {path.name}: {e}") from e


def email_record_from_dict(data: dict[str, Any]) -> EmailRecord:
    """Build a record from a JSON export. Accepts camelCase or snake_case keys."""
    recipients = data.get("recipients") or {}
    sender = data.get("sender") or data.get("from") or ""

    return EmailRecord(
        subject=_get(data, "subject") or "",
        sender=_to_address(sender),
        to=[_to_address(r) for r in (recipients.get("to") or data.get("to") or [])],
        cc=[_to_address(r) for r in (recipients.get("cc") or data.get("cc") or [])],
        sent_date=_coerce_date(_get(data, "sent_date", "sentDate")),
        received_date=_coerce_date(_get(data, "received_date", "receivedDate")),
        attachments=[_to_attachment(a) for a in (data.get("attachments") or [])],
        body_text=_get(data, "body_text", "bodyText", "body", "plainText") or "",
        html_body=_get(data, "html_body", "htmlBody") or "",
        cleaned_text=_get(data, "cleaned_text", "cleanedText") or "",
        extracted_text=_get(data, "extracted_text", "extractedText") or "",
        raw_body=_get(data, "raw_body", "rawBody") or "",
        source_path=_get(data, "source_path", "sourcePath", "fileName") or "",
        message_id=_get(data, "message_id", "messageId") or "",
        entities=dict(data.get("entities") or {}),
    )


def strip_html(html: str) -> str:
    """Visible text of an HTML body, one block per line."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()
    text = soup.get_text(separator="\n")
    return re.sub(r"\n\s*\n+", "\n\n", text).strip()


def _get(data: dict, *keys: str):
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


def _parse_sender(raw: str, email: str | None = None) -> EmailAddress:
    raw = raw.strip()
    if raw and "@" not in raw and "<" not in raw:
        # bare display name, e.g. an Exchange sender without SMTP address
        return EmailAddress(name=raw, email=(email or "").strip())
    name, addr = parseaddr(raw)
    return EmailAddress(name=name.strip(), email=(email or addr or "").strip())


def _split_recipients(header: str) -> list[EmailAddress]:
    recipients = []
    for part in re.split(r"[;,]", header):
        part = part.strip()
        if part:
            recipients.append(_parse_sender(part))
    return recipients


def _to_address(value: Any) -> EmailAddress:
    if isinstance(value, EmailAddress):
        return value
    if isinstance(value, dict):
        return EmailAddress(
            name=(value.get("name") or "").strip(),
            email=(value.get("email") or value.get("address") or "").strip(),
        )
    return _parse_sender(str(value or ""))


def _to_attachment(value: Any) -> Attachment:
    if isinstance(value, dict):
        return Attachment(
            file_name=value.get("file_name") or value.get("fileName") or value.get("name") or "",
            size=value.get("size"),
            content_type=value.get("content_type") or value.get("contentType") or "",
        )
    return Attachment(file_name=str(value))


def _coerce_date(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    try:
        return date_parser.parse(text)
    except (ValueError, OverflowError):
        logger.warning(f"Unrecognised date value: {text!r}")
        return None
