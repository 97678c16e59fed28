"""Per-category budget ceilings for one user."""

from decimal import Decimal

from pydantic import BaseModel, Field


class BudgetMap(BaseModel):
    """
    Category -> budget ceiling.

    A category has at most one ceiling; setting it again overwrites it.
    A category with no ceiling reads as a zero budget.
    """

    ceilings: dict[str, Decimal] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.ceilings)

    def set(self, category: str, amount: Decimal) -> None:
        self.ceilings[category] = amount

    def get(self, category: str) -> Decimal:
        return self.ceilings.get(category, Decimal("0"))

    def is_empty(self) -> bool:
        return not self.ceilings

    def items(self) -> list[tuple[str, Decimal]]:
        """(category, ceiling) pairs ordered by category."""
        return sorted(self.ceilings.items())
