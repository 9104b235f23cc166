"""Core constants: searchable model names, model ranking, and index table names.

Single source of truth for the set of models the index knows about (DRY).
Used by the index query builder, scoring, and the index lifecycle.
"""

# Every model the search index holds rows for.
ALL_MODELS: frozenset[str] = frozenset(
    {
        "action",
        "card",
        "collection",
        "dashboard",
        "database",
        "dataset",
        "indexed-entity",
        "metric",
        "segment",
        "table",
    }
)

# Models whose rows can only be produced for an initialized, authenticated user.
MODELS_REQUIRING_USER: frozenset[str] = frozenset({"indexed-entity"})

# Models ordered from most to least relevant; index of a model is its model_rank.
MODEL_RANKING: tuple[str, ...] = (
    "dashboard",
    "metric",
    "segment",
    "indexed-entity",
    "card",
    "dataset",
    "collection",
    "table",
    "action",
    "database",
)

# Index tables: queries read ACTIVE; reindex builds PENDING then swaps it in.
INDEX_TABLE_ACTIVE = "search_index"
INDEX_TABLE_PENDING = "search_index_next"
INDEX_TABLE_RETIRED = "search_index_retired"

# Permission path that grants everything.
ROOT_PERMISSION_PATH = "/"

# Scorer columns are labelled <name><SCORE_COLUMN_SUFFIX> so they never shadow
# index columns of the same name (pinned, model).
SCORE_COLUMN_SUFFIX = "_score"


def score_column(name: str) -> str:
    """Result column label for scorer name."""
    return f"{name}{SCORE_COLUMN_SUFFIX}"
