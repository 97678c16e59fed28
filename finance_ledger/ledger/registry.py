"""
User Profiles and the Profile Registry

A profile owns exactly one TransactionStore and one BudgetMap; the
registry owns every profile. Nothing is shared between profiles.

DESIGN DECISION: The registry does not enforce unique usernames.
Registration (finance_ledger.orchestrator) checks before appending;
lookup is a plain linear search in load order.
"""

from pydantic import BaseModel, Field

from finance_ledger.ledger.budgets import BudgetMap
from finance_ledger.ledger.transactions import TransactionStore
from finance_ledger.models.outcome import ErrorKind, Outcome


class UserProfile(BaseModel):
    """
    One user's credentials plus their private ledger and budgets.

    The password is stored in plain text, matching the persisted format.
    """

    username: str
    password: str
    transactions: TransactionStore = Field(default_factory=TransactionStore)
    budgets: BudgetMap = Field(default_factory=BudgetMap)

    @property
    def next_id(self) -> int:
        return self.transactions.next_id


class UserProfileRegistry(BaseModel):
    """All loaded profiles, in file order."""

    profiles: list[UserProfile] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.profiles)

    def find_by_username(self, username: str) -> Outcome[UserProfile]:
        for profile in self.profiles:
            if profile.username == username:
                return Outcome.ok(profile)
        return Outcome.fail(ErrorKind.NOT_FOUND, f"No profile named {username!r}")

    def contains(self, username: str) -> bool:
        return self.find_by_username(username).success

    def append(self, profile: UserProfile) -> None:
        self.profiles.append(profile)

    def all(self) -> list[UserProfile]:
        return list(self.profiles)

    def check_credentials(self, username: str, password: str) -> Outcome[UserProfile]:
        """
        Find the profile and compare its password.

        Unknown user and wrong password fail the same way so a caller
        cannot tell which usernames exist.
        """
        found = self.find_by_username(username)
        if not found.success or found.value.password != password:
            return Outcome.fail(ErrorKind.INVALID_CREDENTIALS, "Invalid username or password")
        return found
