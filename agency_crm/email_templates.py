"""
Email templates
Default HTML templates seeded into the email_templates table, plus variable rendering
"""

import html
import re
from typing import Optional

_WRAPPER_OPEN = '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
_WRAPPER_CLOSE = "</div>"


def _wrap(inner: str) -> str:
    return f"{_WRAPPER_OPEN}\n{inner.strip()}\n{_WRAPPER_CLOSE}"


DEFAULT_TEMPLATES = {
    "interpreter_outreach": {
        "subject": "Job Opportunity - {{facility_name}} on {{job_date}}",
        "body": _wrap(
            """
  <h2 style="color: #333;">Job Opportunity Available</h2>
  <p>Hi {{interpreter_name}},</p>
  <p>We have a new interpreting opportunity that matches your skills:</p>
  <div style="background: #f5f5f5; padding: 15px; border-radius: 8px; margin: 20px 0;">
    <p><strong>Facility:</strong> {{facility_name}}</p>
    <p><strong>Date:</strong> {{job_date}}</p>
    <p><strong>Time:</strong> {{start_time}} - {{end_time}}</p>
    <p><strong>Location:</strong> {{location}}</p>
    <p><strong>Rate:</strong> {{rate_info}}</p>
  </div>
  <p>Please reply to this email or contact us to confirm your availability.</p>
  <p>Thank you,<br>ECASL Team</p>
"""
        ),
    },
    "interpreter_confirmation": {
        "subject": "Confirmed: {{facility_name}} on {{job_date}}",
        "body": _wrap(
            """
  <h2 style="color: #28a745;">Job Confirmation</h2>
  <p>Hi {{interpreter_name}},</p>
  <p>This email confirms your assignment for the following job:</p>
  <div style="background: #e8f5e9; padding: 15px; border-radius: 8px; margin: 20px 0;">
    <p><strong>Job Number:</strong> {{job_number}}</p>
    <p><strong>Facility:</strong> {{facility_name}}</p>
    <p><strong>Date:</strong> {{job_date}}</p>
    <p><strong>Time:</strong> {{start_time}} - {{end_time}}</p>
    <p><strong>Location:</strong> {{location}}</p>
    <p><strong>Contact:</strong> {{contact_name}} - {{contact_phone}}</p>
  </div>
  <p>Please arrive 10-15 minutes early. If you need to cancel, please contact us as soon as possible.</p>
  <p>Thank you,<br>ECASL Team</p>
"""
        ),
    },
    "invoice_reminder": {
        "subject": "Invoice {{invoice_number}} - Payment Reminder",
        "body": _wrap(
            """
  <h2 style="color: #dc3545;">Payment Reminder</h2>
  <p>Dear {{facility_contact}},</p>
  <p>This is a friendly reminder that the following invoice is due for payment:</p>
  <div style="background: #fff3cd; padding: 15px; border-radius: 8px; margin: 20px 0;">
    <p><strong>Invoice Number:</strong> {{invoice_number}}</p>
    <p><strong>Amount Due:</strong> {{amount_due}}</p>
    <p><strong>Due Date:</strong> {{due_date}}</p>
    <p><strong>Service Date:</strong> {{service_date}}</p>
  </div>
  <p>If you have already submitted payment, please disregard this notice.</p>
  <p>Thank you,<br>ECASL Team</p>
"""
        ),
    },
    "job_completion_thanks": {
        "subject": "Thank You - {{facility_name}} Job Complete",
        "body": _wrap(
            """
  <h2 style="color: #333;">Thank You!</h2>
  <p>Hi {{interpreter_name}},</p>
  <p>Thank you for completing the assignment at {{facility_name}} on {{job_date}}.</p>
  <p>Your payment will be processed according to our standard schedule.</p>
  <p>Best regards,<br>ECASL Team</p>
"""
        ),
    },
    "contract_send": {
        "subject": "{{agency_name}} Agreement - {{recipient_name}}",
        "body": _wrap(
            """
  <p>Hello {{recipient_name}},</p>
  <p>Please find your agreement with {{agency_name}} attached.
  Sign and return a copy at your earliest convenience.</p>
  <p>Thank you,<br>ECASL Team</p>
"""
        ),
    },
}


def render_template(text: Optional[str], variables: Optional[dict], escape_html: bool = False) -> str:
    """
    Replace {{key}} and {key} placeholders with values.

    Pass escape_html=True when rendering an HTML body so values such as
    facility names or meeting links cannot inject markup. Subjects are plain
    text and render unescaped.
    """
    result = text or ""
    for key, value in (variables or {}).items():
        replacement = "" if value is None else str(value)
        if escape_html:
            replacement = html.escape(replacement, quote=True)
        result = re.sub(r"\{\{" + re.escape(key) + r"\}\}", lambda _m: replacement, result)
        result = re.sub(r"\{" + re.escape(key) + r"\}", lambda _m: replacement, result)
    return result


def plain_text_to_html(text: str) -> str:
    """Escape a typed message and keep its line breaks"""
    escaped = html.escape(text or "", quote=False)
    return escaped.replace("\n", "<br>")
