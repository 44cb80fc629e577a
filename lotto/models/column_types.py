from sqlalchemy import JSON, BigInteger, Integer
from sqlalchemy.dialects.postgresql import ARRAY

# Use BigInteger by default, with a SQLite-safe Integer variant for autoincrement PKs.
ID_TYPE = BigInteger().with_variant(Integer, "sqlite")

# Ordered integer lists: native INTEGER[] on PostgreSQL, JSON elsewhere.
# ``none_as_null`` keeps Python ``None`` as SQL NULL so "not drawn yet" is
# testable with ``IS NULL`` on every backend.
INT_LIST_TYPE = JSON(none_as_null=True).with_variant(ARRAY(Integer), "postgresql")
