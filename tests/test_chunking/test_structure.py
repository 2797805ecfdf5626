"""Tests for preprocessing and structure extraction."""

from email_rag.chunking import structure
from email_rag.chunking.models import SectionType
from email_rag.chunking.structure import (
    extract_structure,
    preprocess_text,
    try_extract_structure,
)


def test_preprocess_normalizes_whitespace():
    raw = "Line one\r\n\r\n\r\n\r\nLine   two  \r\n"
    assert preprocess_text(raw) == "Line one\n\nLine two"


def test_preprocess_trims_lines_and_tabs():
    assert preprocess_text("  a\t\tb  \n   c") == "a b\nc"
    assert preprocess_text("") == ""


def test_plain_body_is_single_section():
    sections = extract_structure("Just a note.\nSecond line.")
    assert len(sections) == 1
    assert sections[0].type == SectionType.BODY
    assert sections[0].content == "Just a note.\nSecond line."
    assert sections[0].is_quoted is False


def test_empty_content_has_no_sections():
    assert extract_structure("") == []
    assert extract_structure("  \n ") == []


def test_signature_is_terminal():
    sections = extract_structure("Message body.\n--\nJohn Doe\nCEO")
    assert [s.type for s in sections] == [SectionType.BODY, SectionType.SIGNATURE]
    assert sections[1].content == "--\nJohn Doe\nCEO"
    assert sections[1].start_line == 1


def test_signature_swallows_later_quotes():
    content = "Body text.\nBest regards,\nAnn\n> quoted after signature"
    sections = extract_structure(content)
    assert sections[-1].type == SectionType.SIGNATURE
    assert "> quoted after signature" in sections[-1].content
    assert len(sections) == 2


def test_mobile_signature():
    sections = extract_structure("See attached.\nSent from my iPhone")
    assert sections[-1].type == SectionType.SIGNATURE


def test_quote_chain_follows_body():
    content = "Sounds good to me.\nOn Mon, J wrote:\n> old text\nNew reply text"
    sections = extract_structure(content)
    assert [s.type for s in sections] == [
        SectionType.BODY,
        SectionType.QUOTE,
        SectionType.QUOTE,
    ]
    assert sections[0].content == "Sounds good to me."
    assert all(s.is_quoted for s in sections[1:])
    assert sections[1].content == "On Mon, J wrote:"
    assert sections[1].start_line == 1
    assert sections[2].content == "> old text\nNew reply text"
    assert sections[2].start_line == 2


def test_every_quote_start_line_opens_a_section():
    sections = extract_structure("Reply.\nOn Mon, J wrote:\n> a\n> b\nolder")
    assert [(s.type, s.content) for s in sections] == [
        (SectionType.BODY, "Reply."),
        (SectionType.QUOTE, "On Mon, J wrote:"),
        (SectionType.QUOTE, "> a"),
        (SectionType.QUOTE, "> b\nolder"),
    ]
    assert [s.start_line for s in sections] == [0, 1, 2, 3]


def test_quote_header_starts_new_quote():
    content = "Reply.\n> a\nFrom: X Sent: Monday\nolder message"
    sections = extract_structure(content)
    assert [s.type for s in sections] == [
        SectionType.BODY,
        SectionType.QUOTE,
        SectionType.QUOTE,
    ]
    assert sections[1].content == "> a"
    assert sections[2].content == "From: X Sent: Monday\nolder message"


def test_inline_thanks_is_not_a_signature():
    sections = extract_structure("Hi team, lunch at noon. Thanks, J")
    assert len(sections) == 1
    assert sections[0].type == SectionType.BODY


def test_failure_degrades_to_single_body(monkeypatch):
    def boom(content):
        raise RuntimeError("bad line")

    monkeypatch.setattr(structure, "_scan_sections", boom)
    result = try_extract_structure("Some text")
    assert result.degraded is True
    assert result.error == "bad line"
    assert len(result.sections) == 1
    assert result.sections[0].type == SectionType.BODY
    assert result.sections[0].content == "Some text"

    sections = extract_structure("Some text")
    assert sections[0].content == "Some text"
