"""
Contact form endpoint.
Validates a submission, escapes it into an HTML email and relays it
through the configured SMTP transport.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from typing import Any, Dict
import logging

from portfolio.core.mailer import Mailer
from portfolio.core.rate_limit import CONTACT_RATE_LIMIT, limiter
from portfolio.models.contact import ContactSubmission, clean_header, email_subject, render_email_html

router = APIRouter()
logger = logging.getLogger(__name__)

MISSING_FIELDS = "Missing fields."
SEND_FAILED = "Failed to send email."
PAYLOAD_TOO_LARGE = "Message too large."

# Same cap as a default express.json() body parser
MAX_BODY_BYTES = 100 * 1024

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class PayloadTooLarge(Exception):
    pass


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


async def read_submission(request: Request) -> ContactSubmission:
    """
    Parse a JSON or form-encoded body into a submission.

    Bodies that are empty, malformed or not an object yield an empty
    submission so they are reported as missing fields.

    Raises:
        PayloadTooLarge: if the body exceeds MAX_BODY_BYTES
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > MAX_BODY_BYTES:
        raise PayloadTooLarge(declared)
    body = await request.body()
    if len(body) > MAX_BODY_BYTES:
        raise PayloadTooLarge(len(body))

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        try:
            form = await request.form()
        except HTTPException as e:
            logger.warning(f"Unparseable form body: {e.detail}")
            form = {}
        data = {key: value for key, value in form.items() if isinstance(value, str)}
    else:
        try:
            data = await request.json()
        except ValueError:
            data = {}

    if not isinstance(data, dict):
        data = {}

    return ContactSubmission(
        name=data.get("name"),
        email=data.get("email"),
        subject=data.get("subject"),
        message=data.get("message"),
    )


@router.post("/contact", status_code=status.HTTP_200_OK)
@limiter.limit(CONTACT_RATE_LIMIT)
async def submit_contact(request: Request, mailer: Mailer = Depends(get_mailer)) -> Dict[str, Any]:
    """
    Relay a contact form submission by email.

    Returns:
        {"ok": true} on success, otherwise {"ok": false, "error": ...}
        with status 400 for missing fields, 413 for an oversized body or
        500 when the send fails
    """
    try:
        submission = await read_submission(request)
    except PayloadTooLarge:
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={"ok": False, "error": PAYLOAD_TOO_LARGE},
        )

    if not submission.is_complete():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"ok": False, "error": MISSING_FIELDS},
        )

    try:
        await mailer.send(
            from_addr=mailer.sender,
            to_addr=mailer.to_email,
            reply_to=clean_header(submission.email),
            subject=email_subject(submission),
            html=render_email_html(submission),
        )
    except Exception as e:
        logger.error(f"❌ Email send failed: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": SEND_FAILED},
        )

    logger.info("✅ Contact message relayed")
    return {"ok": True}
