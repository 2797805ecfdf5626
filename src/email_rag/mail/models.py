"""Data models for the mail module."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath


@dataclass(frozen=True)
class EmailAddress:
    """A display name / address pair. Either part may be empty."""

    name: str = ""
    email: str = ""

    def display(self) -> str:
        """``Name <email>``, bare email, or bare name, first available."""
        if self.name and self.email:
            return f"{self.name} <{self.email}>"
        return self.email or self.name


@dataclass(frozen=True)
class Attachment:
    """Attachment metadata only; payloads are never loaded."""

    file_name: str
    size: int | None = None
    content_type: str = ""


@dataclass
class EmailRecord:
    """Structured representation of one parsed email.

    Treated as read-only while it is being chunked.
    """

    subject: str = ""
    sender: EmailAddress = field(default_factory=EmailAddress)
    to: list[EmailAddress] = field(default_factory=list)
    cc: list[EmailAddress] = field(default_factory=list)
    sent_date: datetime | None = None
    received_date: datetime | None = None
    attachments: list[Attachment] = field(default_factory=list)
    body_text: str = ""
    html_body: str = ""
    cleaned_text: str = ""
    extracted_text: str = ""
    raw_body: str = ""
    source_path: str = ""
    message_id: str = ""
    entities: dict[str, list[str]] = field(default_factory=dict)

    @property
    def email_id(self) -> str:
        """Stable identifier used as the prefix of every chunk id."""
        if self.source_path:
            name = PurePath(self.source_path.replace("\\", "/")).name
            if name.lower().endswith(".msg"):
                name = name[:-4]
            if name:
                return name
        if self.message_id:
            return self.message_id.strip("<>")
        date = self.sent_date.isoformat() if self.sent_date else ""
        seed = f"{self.subject}|{self.sender.email}|{date}"
        return hashlib.sha1(seed.encode("utf-8")).hexdigest()[:16]

    @property
    def sender_display_name(self) -> str:
        return self.sender.name or self.sender.email

    @property
    def attachment_names(self) -> list[str]:
        return [a.file_name for a in self.attachments if a.file_name]
