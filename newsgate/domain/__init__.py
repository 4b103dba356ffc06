"""Pure helpers: cookie relay, payload normalization, category taxonomy.

Free of FastAPI routing concerns so they can be unit-tested on their own and
reused by the smoke runner.
"""
__all__ = ["categories", "cookies", "models", "payloads"]
