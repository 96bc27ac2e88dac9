"""
Recipe catalogue.

Responsibilities:
- Hold recipe records in a pandas-backed store with store-assigned ids.
- Compose optional search criteria into a single filter over the store.
- Serve paginated searches and single-record lookups.
- Create, bulk-create, update and delete recipes.
"""
