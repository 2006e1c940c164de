"""
Fake implementations for testing.

Fakes are simplified working implementations that behave like the real
drivers but avoid external services.

Key fakes:
- FakeMotorClient: In-memory stand-in for Motor's AsyncIOMotorClient
- FakeClientFactory: Client factory for MongoClientManager that records clients
"""

from tests.fakes.mongo import (
    FakeClientFactory,
    FakeCollection,
    FakeCursor,
    FakeDatabase,
    FakeMotorClient,
)

__all__ = [
    "FakeClientFactory",
    "FakeCollection",
    "FakeCursor",
    "FakeDatabase",
    "FakeMotorClient",
]
