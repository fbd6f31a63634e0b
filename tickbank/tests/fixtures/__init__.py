"""Importable suite modules used by suite loader and CLI tests."""
