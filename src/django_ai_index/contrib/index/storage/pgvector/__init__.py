from .provider import PgVectorIndex

__all__ = ["PgVectorIndex"]
