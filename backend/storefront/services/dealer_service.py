"""
Dealer (vendor) registration and login

Dealers log in with the email and phone number they registered with; a
successful login returns the dealerId the frontend keeps for later calls.
"""

import logging
from typing import Any, Dict, Optional

from ulid import ULID

from storefront.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from storefront.repositories.document_store import DocumentStore
from storefront.services.catalog_service import utc_now_iso

logger = logging.getLogger(__name__)

DEALER_KEY = "dealerId"


def normalize_dealer(item: Dict[str, Any]) -> Dict[str, Any]:
    """Dealer emails are stored lower-cased; login matches on equality."""
    email = item.get("email")
    if isinstance(email, str):
        return {**item, "email": email.lower()}
    return item


class DealerService:

    def __init__(self, dealers: DocumentStore):
        self.dealers = dealers

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        phone: Optional[str],
        company: Optional[str] = None,
        address: Optional[str] = None,
    ) -> str:
        if not name or not email or not phone:
            raise ValidationError("Missing required fields")

        item = {
            DEALER_KEY: str(ULID()),
            "name": name,
            "email": email,
            "phone": phone,
            "company": company or "",
            "address": address or "",
            "createdAt": utc_now_iso(),
        }
        item = normalize_dealer(item)
        await self.dealers.put(item)
        logger.info(f"Dealer registered: {item[DEALER_KEY]}")
        return item[DEALER_KEY]

    async def login(self, email: Optional[str], phone: Optional[str]) -> str:
        """
        Returns:
            dealerId of the matching dealer

        Raises:
            ValidationError: email or phone missing
            NotFoundError: no dealer registered with this email
            AuthenticationError: phone does not match
        """
        if not email or not phone:
            raise ValidationError("Email and Phone Number are required.")

        matches = await self.dealers.scan(filters={"email": email.lower()})
        if not matches:
            raise NotFoundError("No dealer found with that email.")

        dealer = matches[0]
        if dealer.get("phone") != phone:
            logger.warning(f"Dealer login failed for dealer {dealer.get(DEALER_KEY)}")
            raise AuthenticationError("Invalid email or phone number.")

        return dealer[DEALER_KEY]

    async def get_dealer(self, dealer_id: str) -> Dict[str, Any]:
        item = await self.dealers.get({DEALER_KEY: dealer_id})
        if item is None:
            raise NotFoundError("Dealer not found")
        return item
