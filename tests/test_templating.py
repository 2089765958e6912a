"""
Snippetbox — Template Helper Tests
====================================

What:  human_date formatting and template loading.
"""

from datetime import datetime, timedelta, timezone

from snippetbox.templating import human_date, templates


class TestHumanDate:
    def test_utc(self):
        value = datetime(2024, 3, 17, 10, 15, tzinfo=timezone.utc)
        assert human_date(value) == "17 Mar 2024 at 10:15"

    def test_converts_to_utc(self):
        cet = timezone(timedelta(hours=1))
        value = datetime(2024, 3, 17, 10, 15, tzinfo=cet)
        assert human_date(value) == "17 Mar 2024 at 09:15"

    def test_naive_is_treated_as_utc(self):
        assert human_date(datetime(2024, 3, 17, 10, 15)) == "17 Mar 2024 at 10:15"

    def test_none_is_empty(self):
        assert human_date(None) == ""


class TestTemplates:
    def test_filter_is_registered(self):
        assert templates.env.filters["human_date"] is human_date

    def test_every_page_loads(self):
        for page in (
            "home", "view", "create", "signup", "login", "account", "password", "about",
        ):
            assert templates.get_template(f"pages/{page}.html") is not None

    def test_autoescape_enabled(self):
        template = templates.env.from_string("{{ value }}")
        assert "&lt;script&gt;" in template.render(value="<script>")
