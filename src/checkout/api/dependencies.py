"""Request dependencies shared by the Checkout routers."""

from fastapi import Header, HTTPException


def current_buyer(x_buyer_email: str | None = Header(default=None)) -> str:
    """Email of the authenticated buyer, as asserted by the upstream gateway."""
    if not x_buyer_email or not x_buyer_email.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_buyer_email.strip()
