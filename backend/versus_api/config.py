import os

def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val

API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

# Versus limits shared by creation and edit validation.
MAX_PLAYERS = 12
MAX_OBJECTIVES = 12
MAX_OBJECTIVE_POINTS = 999_999
MAX_VERSUS_NAME_LENGTH = 100
MAX_OBJECTIVE_TITLE_LENGTH = 100
MAX_OBJECTIVE_DESCRIPTION_LENGTH = 500
MAX_NICKNAME_LENGTH = 50

VERSUS_TYPES = (
    "Scavenger Hunt",
    "Fitness Challenge",
    "Chore Competition",
    "Swear Jar",
    "Other",
)

CREATE_STRATEGIES = ("transaction", "compensate")


def get_create_strategy(value: str | None = None) -> str:
    """Return ``value``, or the configured Versus creation strategy if unset.

    ``transaction`` writes the Versus, memberships and objectives in one
    database transaction. ``compensate`` commits each step separately and
    deletes the Versus row when a later step fails.
    """

    raw = (value or os.getenv("VERSUS_CREATE_STRATEGY") or "transaction").strip().lower()
    if raw not in CREATE_STRATEGIES:
        raise RuntimeError(
            f"Unknown versus creation strategy {raw!r}; expected one of: "
            + ", ".join(CREATE_STRATEGIES)
        )
    return raw
