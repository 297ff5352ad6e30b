from typing import Any, List, Optional

from app.core.errors import ValidationError

_FORBIDDEN_CHARS = ("/", "\\", "\x00")


def normalize_wallet(value: Optional[str], field: str = "wallet") -> str:
    """Lower-cased wallet used for storage addressing and membership checks."""
    wallet = (value or "").strip().lower()
    if not wallet:
        raise ValidationError(f"Missing {field}")
    if wallet.startswith(".") or any(ch in wallet for ch in _FORBIDDEN_CHARS):
        raise ValidationError(f"Invalid {field}")
    return wallet


def wallet_list(value: Any) -> List[str]:
    """Stored membership list as lower-cased unique wallets; anything else reads as empty."""
    if not isinstance(value, list):
        return []
    wallets = []
    for item in value:
        if not isinstance(item, str):
            continue
        wallet = item.strip().lower()
        if wallet and wallet not in wallets:
            wallets.append(wallet)
    return wallets
