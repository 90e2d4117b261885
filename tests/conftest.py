"""Pytest configuration and fixtures."""

import os

import pytest

TESTDATA = os.path.join(os.path.dirname(__file__), 'testdata')


def data_path(name):
    return os.path.join(TESTDATA, name)


@pytest.fixture
def changeset_path():
    """Path to a real osmChange download with repeated sections."""
    return data_path('changeset_21598503.osc')


@pytest.fixture
def changeset_bytes(changeset_path):
    with open(changeset_path, 'rb') as f:
        return f.read()


@pytest.fixture
def relations_bytes():
    """Out-of-order sections with relations, members and escaped text."""
    with open(data_path('relations.osc'), 'rb') as f:
        return f.read()
