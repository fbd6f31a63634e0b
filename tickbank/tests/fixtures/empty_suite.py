"""Module that declares no tests."""

VALUE = 1
