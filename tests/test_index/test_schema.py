"""Tests for the index definition."""

from email_rag.index.schema import (
    SCORING_PROFILE,
    SEMANTIC_CONFIGURATION,
    VECTOR_FIELD,
    VECTOR_PROFILE,
    build_index_definition,
)


def test_index_definition():
    definition = build_index_definition("mail", vector_dimensions=256)
    fields = {f["name"]: f for f in definition["fields"]}

    assert definition["name"] == "mail"
    assert [name for name, f in fields.items() if f.get("key")] == ["id"]
    assert fields[VECTOR_FIELD]["dimensions"] == 256
    assert fields[VECTOR_FIELD]["vectorSearchProfile"] == VECTOR_PROFILE
    assert fields["content"]["searchable"] is True
    assert fields["parent_id"]["filterable"] is True
    assert definition["semantic"]["defaultConfiguration"] == SEMANTIC_CONFIGURATION
    assert definition["vectorSearch"]["algorithms"][0]["hnswParameters"]["metric"] == "cosine"


def test_scoring_profile_boosts_weight_and_quality():
    profile = build_index_definition("mail")["scoringProfiles"][0]
    assert profile["name"] == SCORING_PROFILE
    assert [f["fieldName"] for f in profile["functions"]] == [
        "search_weight",
        "content_quality_score",
    ]
