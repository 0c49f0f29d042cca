from fastapi import Request
from typing import Optional
import logging
from auth import decode_access_token, identity_from_claims
from database import database, DocumentStore

logger = logging.getLogger(__name__)

async def get_current_user(request: Request) -> Optional[dict]:
    """Extract and validate current user from JWT token."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None

    token = auth_header.split(" ")[1]
    payload = decode_access_token(token)

    if not payload:
        logger.info("Rejected bearer token on %s", request.url.path)
        return None

    return payload

async def get_student_identity(request: Request) -> Optional[str]:
    """Identity of the calling student, or None (classified later as NO_IDENTITY)."""
    user = await get_current_user(request)
    return identity_from_claims(user)

def get_document_store() -> DocumentStore:
    """Store handed to the clearance core; overridden in tests."""
    return database.get_store()
