from pydantic import BaseModel, field_validator
from typing import Any, Optional
import re

SUBJECT_PREFIX = "[Portfolio]"
DEFAULT_SUBJECT = "New message"

_LINE_BREAKS = re.compile(r"[\r\n]+")

_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


class ContactSubmission(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None

    @field_validator("name", "email", "subject", "message", mode="before")
    @classmethod
    def coerce_text(cls, value: Any):
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, dict)):
            return None
        return str(value)

    def is_complete(self) -> bool:
        """Name, email and message are all present and non-empty"""
        return bool(self.name and self.email and self.message)


def escape_html(value: Any = "") -> str:
    text = "" if value is None else str(value)
    # & first so the other entities are not double-escaped
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def clean_header(value: Optional[str]) -> Optional[str]:
    """Collapse CR/LF runs to a single space so the value fits on one header line"""
    if value is None:
        return None
    return _LINE_BREAKS.sub(" ", value).strip()


def email_subject(submission: ContactSubmission) -> str:
    subject = clean_header(submission.subject) or DEFAULT_SUBJECT
    return f"{SUBJECT_PREFIX} {subject}"


def render_email_html(submission: ContactSubmission) -> str:
    subject_line = ""
    if submission.subject:
        subject_line = f"<p><strong>Subject:</strong> {escape_html(submission.subject)}</p>"

    return f"""
      <div style="font-family:Inter,Arial,sans-serif;padding:16px">
        <h2>New Portfolio Message</h2>
        <p><strong>Name:</strong> {escape_html(submission.name)}</p>
        <p><strong>Email:</strong> {escape_html(submission.email)}</p>
        {subject_line}
        <hr style="border:none;border-top:1px solid #eee;margin:16px 0" />
        <p style="white-space:pre-wrap">{escape_html(submission.message)}</p>
      </div>
    """
