"""Authentication context for the current storefront user."""

from typing import Dict, Mapping, Optional

# Claim types issued by the identity provider
CLAIM_SUBJECT = "sub"
CLAIM_NAME = "name"

PROFILE_CLAIMS = {
    "Name": "name",
    "LastName": "last_name",
    "Street": "address_street",
    "City": "address_city",
    "State": "address_state",
    "ZipCode": "address_zip_code",
    "Country": "address_country",
    "Email": "email",
    "PhoneNumber": "phone_number",
}


class AuthenticationContext:
    """Claims and access token of the current user, as forwarded by the gateway."""

    def __init__(self, claims: Optional[Mapping[str, str]] = None, access_token: Optional[str] = None):
        self.claims: Dict[str, str] = dict(claims or {})
        self.access_token = access_token

    @classmethod
    def anonymous(cls) -> "AuthenticationContext":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.claims.get(CLAIM_SUBJECT))

    def refresh(self, other: "AuthenticationContext") -> None:
        """Take over the claims and token of a newer context for the same user."""
        self.claims = dict(other.claims)
        self.access_token = other.access_token

    def get_claim(self, claim_type: str) -> Optional[str]:
        value = self.claims.get(claim_type)
        return value or None

    def get_buyer_id(self) -> Optional[str]:
        return self.get_claim(CLAIM_SUBJECT)

    def get_user_name(self) -> Optional[str]:
        return self.get_claim(CLAIM_NAME)

    def get_profile(self) -> Dict[str, str]:
        """Allow-listed profile fields; claims outside the list are never exposed."""
        return {field: self.claims.get(claim, "") for field, claim in PROFILE_CLAIMS.items()}
