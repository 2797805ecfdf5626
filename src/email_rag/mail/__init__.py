"""Email records and the parsers that produce them.

``parse_msg_file`` needs the optional ``extract-msg`` dependency, which is
only imported when called.
"""

from email_rag.mail.entities import extract_entities
from email_rag.mail.models import Attachment, EmailAddress, EmailRecord
from email_rag.mail.parser import email_record_from_dict, parse_msg_file, strip_html

__all__ = [
    "Attachment",
    "EmailAddress",
    "EmailRecord",
    "email_record_from_dict",
    "extract_entities",
    "parse_msg_file",
    "strip_html",
]
