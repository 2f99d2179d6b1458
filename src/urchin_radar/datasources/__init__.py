"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, request building, errors
    └── {feature}.py      # Models + fetch functions (one per endpoint/concept)

Fetch functions return dataclasses and raise on non-success responses.
They never cache, persist, or retry; see ``services/http.py``.

Sources:
  - gbif/  GBIF occurrence search (species occurrence records)
"""
