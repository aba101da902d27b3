"""HTML email templates for document transitions.

Every interpolated value is HTML-escaped; names and rejection notes are
user-supplied text.
"""

from datetime import datetime
from html import escape
from string import Template
from typing import Optional, Tuple

from domain.documents.document_status import DocumentStatus

SUBMISSION_SUBJECT = "New Document Submission"
APPROVED_SUBJECT = "Document Approved"
REJECTED_SUBJECT = "Document Rejected"

APPROVED_COLOR = "#10b981"
REJECTED_COLOR = "#ef4444"

_LAYOUT = Template("""<!DOCTYPE html>
<html>
<head>
  <title>$title</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333333; margin: 0; padding: 0;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background-color: $color; color: white; padding: 20px; text-align: center;">
      <h1>$title</h1>
    </div>
    <div style="padding: 20px; background-color: #ffffff;">
$body
      <a href="$link" style="display: inline-block; background-color: $color; color: white; text-decoration: none; padding: 10px 20px; border-radius: 4px; margin-top: 20px;">$link_label</a>
    </div>
    <div style="background-color: #f6f6f6; padding: 15px; text-align: center; font-size: 12px; color: #666666;">
      <p>This is an automated message from the onboarding document system.</p>
    </div>
  </div>
</body>
</html>
""")

_SUBMISSION_BODY = Template("""      <p>Hello Admin,</p>
      <p>A new document has been submitted for your review.</p>
      <div style="background-color: #f9f9f9; border-left: 4px solid #0070f3; padding: 15px; margin: 20px 0;">
        <p><strong>User:</strong> $user_name ($user_email)</p>
        <p><strong>Document Type:</strong> $document_type</p>
        <p><strong>Submitted On:</strong> $submitted_on</p>
        <p><strong>File Name:</strong> $file_name</p>
      </div>
      <p>Please review this document at your earliest convenience.</p>""")

_STATUS_BODY = Template("""      <p>Hello $user_name,</p>
      <p>$outcome</p>
      <div style="background-color: #f9f9f9; border-left: 4px solid $color; padding: 15px; margin: 20px 0;">
        <p><strong>Document Type:</strong> $document_type</p>
        <p><strong>Submitted On:</strong> $submitted_on</p>
        <p><strong>Reviewed On:</strong> $reviewed_on</p>
        <p><strong>File Name:</strong> $file_name</p>
$reason
      </div>""")


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime("%d %b %Y, %H:%M UTC") if value else "-"


def render_submission_email(
    user_name: Optional[str],
    user_email: str,
    document_type: str,
    file_name: str,
    submitted_on: Optional[datetime],
    review_url: str,
) -> Tuple[str, str]:
    """Email to admins when a user uploads a document. Returns (subject, html)."""
    body = _SUBMISSION_BODY.substitute(
        user_name=escape(user_name or user_email),
        user_email=escape(user_email),
        document_type=escape(document_type),
        submitted_on=escape(_format_date(submitted_on)),
        file_name=escape(file_name),
    )
    html = _LAYOUT.substitute(
        title=SUBMISSION_SUBJECT,
        color="#0070f3",
        body=body,
        link=escape(review_url, quote=True),
        link_label="Review Document",
    )
    return SUBMISSION_SUBJECT, html


def render_status_email(
    user_name: Optional[str],
    document_type: str,
    status: DocumentStatus,
    file_name: str,
    submitted_on: Optional[datetime],
    reviewed_on: Optional[datetime],
    link: str,
    notes: Optional[str] = None,
) -> Tuple[str, str]:
    """Email to the owner after review. Returns (subject, html)."""
    approved = DocumentStatus(status) == DocumentStatus.APPROVED
    color = APPROVED_COLOR if approved else REJECTED_COLOR

    if approved:
        subject = APPROVED_SUBJECT
        outcome = "We're pleased to inform you that your document has been <strong>APPROVED</strong>."
        reason = ""
        link_label = "View Documents"
    else:
        subject = REJECTED_SUBJECT
        outcome = (
            "We regret to inform you that your document has been <strong>REJECTED</strong>. "
            "Please upload a new one."
        )
        reason = (
            f'        <p><strong style="color: {REJECTED_COLOR};">Reason for Rejection:</strong> '
            f'{escape(notes or "")}</p>'
        )
        link_label = "Upload Again"

    body = _STATUS_BODY.substitute(
        user_name=escape(user_name or "there"),
        outcome=outcome,
        color=color,
        document_type=escape(document_type),
        submitted_on=escape(_format_date(submitted_on)),
        reviewed_on=escape(_format_date(reviewed_on)),
        file_name=escape(file_name),
        reason=reason,
    )
    html = _LAYOUT.substitute(
        title=subject,
        color=color,
        body=body,
        link=escape(link, quote=True),
        link_label=link_label,
    )
    return subject, html
