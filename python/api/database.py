"""
Database Connection Module

Provides the transaction store and importer for FastAPI dependency injection.
"""

from functools import lru_cache

from fastapi import Depends

from importer import ImportSettings, SQLTransactionStore, StatementImporter


@lru_cache
def get_settings() -> ImportSettings:
    return ImportSettings.from_env()


@lru_cache
def _store_for(database_url: str) -> SQLTransactionStore:
    return SQLTransactionStore(database_url)


@lru_cache
def _importer_for(database_url: str) -> StatementImporter:
    return StatementImporter(_store_for(database_url), settings=get_settings())


def get_importer(settings: ImportSettings = Depends(get_settings)) -> StatementImporter:
    """Get the statement importer for the configured DATABASE_URL.

    One importer is built per database URL and reused across requests,
    together with its loaded category rules and AI clients.
    """
    return _importer_for(settings.database_url)
