"""Azure AI Search index definition for email chunk documents."""

from __future__ import annotations

VECTOR_FIELD = "content_vector"
VECTOR_PROFILE = "email-vector-profile"
VECTOR_ALGORITHM = "email-hnsw"
SEMANTIC_CONFIGURATION = "email-semantic"
SCORING_PROFILE = "email-relevance"


def _field(name: str, type_: str, **attributes) -> dict:
    field = {
        "name": name,
        "type": type_,
        "searchable": False,
        "filterable": False,
        "sortable": False,
        "facetable": False,
        "retrievable": True,
    }
    field.update(attributes)
    return field


def index_fields(vector_dimensions: int) -> list[dict]:
    return [
        _field("id", "Edm.String", key=True, filterable=True),
        _field("content", "Edm.String", searchable=True, analyzer="en.microsoft"),
        {
            "name": VECTOR_FIELD,
            "type": "Collection(Edm.Single)",
            "searchable": True,
            "retrievable": False,
            "dimensions": vector_dimensions,
            "vectorSearchProfile": VECTOR_PROFILE,
        },
        _field("chunk_id", "Edm.String", filterable=True),
        _field("parent_id", "Edm.String", filterable=True, facetable=True),
        _field("chunk_number", "Edm.Int32", filterable=True, sortable=True),
        _field("total_chunks", "Edm.Int32", filterable=True),
        _field("chunk_type", "Edm.String", filterable=True, facetable=True),
        _field("is_header", "Edm.Boolean", filterable=True),
        _field("email_subject", "Edm.String", searchable=True, filterable=True),
        _field("sender_name", "Edm.String", searchable=True, filterable=True, facetable=True),
        _field("sender_email", "Edm.String", filterable=True, facetable=True),
        _field("recipients", "Collection(Edm.String)", searchable=True, filterable=True),
        _field("sent_date", "Edm.DateTimeOffset", filterable=True, sortable=True),
        _field("received_date", "Edm.DateTimeOffset", filterable=True, sortable=True),
        _field("has_attachments", "Edm.Boolean", filterable=True, facetable=True),
        _field("attachment_names", "Collection(Edm.String)", searchable=True),
        _field("search_relevance", "Edm.String", filterable=True, facetable=True),
        _field("search_weight", "Edm.Double", filterable=True, sortable=True),
        _field("content_quality_score", "Edm.Double", filterable=True, sortable=True),
        _field("token_count", "Edm.Int32", filterable=True),
        _field("word_count", "Edm.Int32"),
        _field("is_search_ready", "Edm.Boolean", filterable=True),
        _field("mentioned_emails", "Collection(Edm.String)", filterable=True),
        _field("urls", "Collection(Edm.String)"),
        _field("processed_at", "Edm.DateTimeOffset", filterable=True, sortable=True),
    ]


def build_index_definition(name: str, vector_dimensions: int = 1536) -> dict:
    """Index JSON for ``PUT /indexes/{name}``."""
    return {
        "name": name,
        "fields": index_fields(vector_dimensions),
        "vectorSearch": {
            "algorithms": [{
                "name": VECTOR_ALGORITHM,
                "kind": "hnsw",
                "hnswParameters": {"m": 4, "efConstruction": 400, "efSearch": 500, "metric": "cosine"},
            }],
            "profiles": [{"name": VECTOR_PROFILE, "algorithm": VECTOR_ALGORITHM}],
        },
        "semantic": {
            "defaultConfiguration": SEMANTIC_CONFIGURATION,
            "configurations": [{
                "name": SEMANTIC_CONFIGURATION,
                "prioritizedFields": {
                    "titleField": {"fieldName": "email_subject"},
                    "prioritizedContentFields": [{"fieldName": "content"}],
                    "prioritizedKeywordsFields": [{"fieldName": "sender_name"}],
                },
            }],
        },
        "scoringProfiles": [{
            "name": SCORING_PROFILE,
            "text": {"weights": {"email_subject": 3.0, "sender_name": 2.0, "content": 1.5}},
            "functions": [
                _magnitude("search_weight", boost=2.0),
                _magnitude("content_quality_score", boost=1.5),
            ],
            "functionAggregation": "sum",
        }],
    }


def _magnitude(field_name: str, boost: float) -> dict:
    return {
        "type": "magnitude",
        "fieldName": field_name,
        "boost": boost,
        "interpolation": "linear",
        "magnitude": {
            "boostingRangeStart": 0,
            "boostingRangeEnd": 1,
            "constantBoostBeyondRange": True,
        },
    }
