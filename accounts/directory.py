"""Login accounts and session lookup.

Sessions are the account id stored in a cookie; there is no token store.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from accounts.account import Account


class AuthError(Exception):
    """Login or session failure, carrying the HTTP status to report."""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AccountDirectory:
    """Fixed set of accounts, looked up by id or email."""

    def __init__(self, accounts: List[Account]):
        self._by_id: Dict[str, Account] = {}
        for a in accounts:
            if a.id in self._by_id:
                raise ValueError(f"Duplicate account id: {a.id}")
            self._by_id[a.id] = a

    @classmethod
    def from_config(cls, raw: Dict[str, Any]) -> "AccountDirectory":
        accounts = []
        for a in raw.get("accounts") or []:
            accounts.append(
                Account(
                    id=str(a["id"]),
                    email=str(a["email"]),
                    password=str(a["password"]),
                    first_name=str(a.get("first_name", "")),
                    last_name=str(a.get("last_name", "")),
                    balance=float(a.get("balance", 0.0)),
                )
            )
        return cls(accounts)

    @property
    def accounts(self) -> List[Account]:
        return list(self._by_id.values())

    def get(self, account_id: str) -> Optional[Account]:
        return self._by_id.get(account_id)

    def authenticate(self, email: Optional[str], password: Optional[str]) -> Account:
        if not email or not password:
            raise AuthError("Email and password are required", status_code=400)

        wanted = str(email).lower()
        for a in self._by_id.values():
            if a.email.lower() == wanted:
                if a.password == password:
                    return a
                break
        raise AuthError("Invalid email or password")

    def resolve_session(self, session_id: Optional[str]) -> Account:
        if not session_id:
            raise AuthError("Not authenticated")
        account = self.get(session_id)
        if account is None:
            raise AuthError("Invalid session")
        return account
