"""Synthesize the metadata chunk that leads every email."""

from __future__ import annotations

import logging

from email_rag.chunking.models import Chunk, SearchRelevance, SectionType
from email_rag.mail.models import EmailAddress, EmailRecord

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_header_chunk(email: EmailRecord) -> Chunk | None:
    """Header chunk for ``email``, or None when it cannot be built.

    Lines appear in a fixed order (Subject, From, To, CC, Date, Attachments)
    and only when the field has data. Failures are logged and swallowed so
    the rest of the email can still be chunked.

    An email with none of those fields also gets no header: an empty header
    chunk would be indexed as a whitespace-only document. Chunk numbering
    then starts with the first body chunk.
    """
    try:
        lines = _header_lines(email)
    except Exception as e:
        logger.warning(f"Header chunk omitted for {email.email_id}: {e}")
        return None

    if not lines:
        logger.debug(f"Header chunk omitted for {email.email_id}: no metadata fields")
        return None

    return Chunk.create(
        chunk_type=SectionType.HEADER,
        content="\n".join(lines),
        section_type=SectionType.HEADER,
        is_header=True,
        contains_metadata=True,
        search_relevance=SearchRelevance.HIGH,
        processing_priority="Critical",
        chunk_number=0,
    )


def _header_lines(email: EmailRecord) -> list[str]:
    lines: list[str] = []
    if email.subject:
        lines.append(f"Subject: {email.subject}")

    sender = _format_sender(email.sender)
    if sender:
        lines.append(f"From: {sender}")

    to = _join_addresses(email.to)
    if to:
        lines.append(f"To: {to}")

    cc = _join_addresses(email.cc)
    if cc:
        lines.append(f"CC: {cc}")

    date = email.sent_date or email.received_date
    if date:
        lines.append(f"Date: {date.strftime(DATE_FORMAT)}")

    if email.attachment_names:
        lines.append(f"Attachments: {', '.join(email.attachment_names)}")
    return lines


def _format_sender(sender: EmailAddress) -> str:
    if sender.name and sender.email and sender.email != sender.name:
        return f"{sender.name} <{sender.email}>"
    return sender.name or sender.email


def _join_addresses(addresses: list[EmailAddress]) -> str:
    return ", ".join(a.display() for a in addresses if a.display())
