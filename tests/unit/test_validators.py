import pytest

from agency_crm.email_templates import plain_text_to_html, render_template
from agency_crm.shared.timezones import get_timezone_display_name, get_timezone_from_state
from agency_crm.shared.validators import (
    validate_choice,
    validate_email,
    validate_phone,
    validate_required_rate,
    validate_state,
    validate_zip_code,
)


class TestValidators:
    @pytest.mark.parametrize("phone", ["718-555-0100", "(718) 555-0100", "+1 718 555 0100", "555-0100"])
    def test_valid_phone(self, phone):
        assert validate_phone(phone) == phone

    def test_invalid_phone(self):
        with pytest.raises(ValueError, match="valid phone"):
            validate_phone("call me maybe")

    def test_email_is_lowercased(self):
        assert validate_email("  Jordan@Example.COM ") == "jordan@example.com"

    def test_invalid_email(self):
        with pytest.raises(ValueError):
            validate_email("not-an-email")

    def test_blank_values_become_none(self):
        assert validate_email("") is None
        assert validate_phone(None) is None
        assert validate_zip_code("") is None

    def test_zip_code(self):
        assert validate_zip_code("10312") == "10312"
        assert validate_zip_code("10312-1234") == "10312-1234"
        with pytest.raises(ValueError):
            validate_zip_code("1031")

    def test_state(self):
        assert validate_state("ny") == "NY"
        with pytest.raises(ValueError):
            validate_state("XX")

    def test_required_rate(self):
        assert validate_required_rate(45) == 45
        with pytest.raises(ValueError, match="Rate is required"):
            validate_required_rate(0)

    def test_choice(self):
        assert validate_choice("zelle", ("zelle", "check"), "payment method") == "zelle"
        with pytest.raises(ValueError, match="Invalid payment method"):
            validate_choice("cash", ("zelle", "check"), "payment method")


class TestTimezones:
    def test_state_lookup(self):
        assert get_timezone_from_state("ny") == "America/New_York"
        assert get_timezone_from_state("AZ") == "America/Phoenix"
        assert get_timezone_from_state(None) is None

    def test_display_name(self):
        assert get_timezone_display_name("America/Chicago") == "Central Time (CT)"
        assert get_timezone_display_name("Europe/Paris") == "Europe/Paris"
        assert get_timezone_display_name(None) == ""


class TestTemplateRendering:
    def test_double_and_single_brace_placeholders(self):
        text = "Hi {{name}}, job {job_number} is confirmed"
        assert render_template(text, {"name": "Jordan", "job_number": "2025-00001"}) == (
            "Hi Jordan, job 2025-00001 is confirmed"
        )

    def test_none_values_render_empty(self):
        assert render_template("Contact: {{contact_name}}", {"contact_name": None}) == "Contact: "

    def test_html_bodies_escape_values(self):
        body = '<p>{{facility_name}}</p><a href="{{link}}">join</a>'
        rendered = render_template(
            body, {"facility_name": "Smith & Co <b>", "link": 'https://z" onclick="x'}, escape_html=True
        )
        assert rendered == (
            "<p>Smith &amp; Co &lt;b&gt;</p>"
            '<a href="https://z&quot; onclick=&quot;x">join</a>'
        )

    def test_values_render_raw_by_default(self):
        assert render_template("{{name}} & Co", {"name": "<Pat>"}) == "<Pat> & Co"

    def test_plain_text_to_html_escapes_and_keeps_breaks(self):
        assert plain_text_to_html("Hello <team>\nThanks") == "Hello &lt;team&gt;<br>Thanks"
