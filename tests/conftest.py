"""
Pytest configuration for the request generator tests
"""

import os
import sys

import pytest
from kazoo.exceptions import NodeExistsError, NoNodeError

# Add the repository root to the Python path so tests can import keeper_bench
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


class FakeKeeperClient:
    """In-memory stand-in for the create/get_children subset of KazooClient."""

    def __init__(self):
        self.nodes = {'/': b''}
        self.create_calls = []

    def create(self, path, value=b'', acl=None, ephemeral=False, sequence=False, makepath=False):
        self.create_calls.append(path)
        if path in self.nodes:
            raise NodeExistsError()
        parent = path.rsplit('/', 1)[0] or '/'
        if parent not in self.nodes:
            if not makepath:
                raise NoNodeError()
            self.create(parent, b'', acl=acl, makepath=True)
        self.nodes[path] = value
        return path

    def get_children(self, path):
        if path not in self.nodes:
            raise NoNodeError()
        prefix = path.rstrip('/') + '/'
        return [
            node[len(prefix):]
            for node in self.nodes
            if node != path and node.startswith(prefix) and '/' not in node[len(prefix):]
        ]


@pytest.fixture
def keeper():
    return FakeKeeperClient()
