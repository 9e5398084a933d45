"""
Test data factories.

Uses factory pattern to generate consistent test data.
"""

from typing import Optional
from uuid import uuid4


class PathFactory:
    """
    Factory for training path rows.

    Usage:
        path = PathFactory.create(name="Sales")
        paths = PathFactory.create_batch(3)
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(cls, id: Optional[str] = None, name: Optional[str] = None) -> dict:
        counter = cls._next_counter()
        return {
            "id": id or f"path-{uuid4().hex}",
            "name": name or f"Test Path {counter}",
        }

    @classmethod
    def create_batch(cls, count: int, **overrides) -> list:
        return [cls.create(**overrides) for _ in range(count)]


class CategoryFactory:
    """Factory for category rows."""

    _counter = 0

    @classmethod
    def create(
        cls,
        path_id: str,
        id: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> dict:
        cls._counter += 1
        return {
            "id": id or f"cat-{uuid4().hex}",
            "path_id": path_id,
            "name": name or f"Test Category {cls._counter}",
            "description": description,
        }


class MaterialFactory:
    """Factory for material rows."""

    _counter = 0

    @classmethod
    def create(
        cls,
        category_id: str,
        id: Optional[str] = None,
        name: Optional[str] = None,
        type: str = "document",
        url: str = "https://example.com/doc"
    ) -> dict:
        cls._counter += 1
        return {
            "id": id or f"mat-{uuid4().hex}",
            "category_id": category_id,
            "name": name or f"Test Material {cls._counter}",
            "type": type,
            "url": url,
        }


class BranchFactory:
    """Factory for branch rows."""

    _counter = 0

    @classmethod
    def create(
        cls,
        id: Optional[str] = None,
        name: Optional[str] = None,
        region: Optional[str] = None,
        manager_id: Optional[str] = None
    ) -> dict:
        cls._counter += 1
        return {
            "id": id or f"branch-{uuid4().hex}",
            "name": name or f"Test Branch {cls._counter}",
            "region": region,
            "manager_id": manager_id,
        }


class UserFactory:
    """
    Factory for user profile rows.

    Usage:
        staff = UserFactory.create_staff(branch_id="branch1")
        admin = UserFactory.create(role="admin")
    """

    _counter = 0

    @classmethod
    def create(
        cls,
        id: Optional[str] = None,
        name: Optional[str] = None,
        username: Optional[str] = None,
        role: str = "staff",
        branch_id: Optional[str] = None
    ) -> dict:
        cls._counter += 1
        return {
            "id": id or str(uuid4()),
            "name": name or f"Test User {cls._counter}",
            "username": username or f"user{cls._counter}",
            "role": role,
            "branch_id": branch_id,
        }

    @classmethod
    def create_staff(cls, branch_id: str, **overrides) -> dict:
        return cls.create(role="staff", branch_id=branch_id, **overrides)

    @classmethod
    def create_manager(cls, branch_id: str, **overrides) -> dict:
        return cls.create(role="manager", branch_id=branch_id, **overrides)


def make_csv(header: list[str], rows: list[list[str]], newline: str = "\n") -> str:
    """Build CSV text from plain cells (no quoting applied)."""
    lines = [",".join(header)] + [",".join(row) for row in rows]
    return newline.join(lines) + newline
