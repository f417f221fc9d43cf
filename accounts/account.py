from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

@dataclass
class Account:
    id: str
    email: str
    password: str
    first_name: str
    last_name: str
    balance: float = 0.0  # cash available for buys

    def public_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "balance": self.balance,
        }
