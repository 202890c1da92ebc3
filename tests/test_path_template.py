# tests/test_path_template.py
# Date placeholder expansion for note paths

from datetime import datetime

from shared.path_template import expand_template, format_date

NOW = datetime(2024, 5, 17, 8, 5, 9)


def test_plain_date_placeholder_uses_iso_day():
    assert expand_template("Daily/{{date}}.md", NOW) == "Daily/2024-05-17.md"


def test_custom_format_tokens():
    assert expand_template("{{date:YYYY/MM/DD}}.md", NOW) == "2024/05/17.md"
    assert expand_template("{{date:YY-MMM}}", NOW) == "24-May"
    assert expand_template("{{date:HH.mm.ss}}", NOW) == "08.05.09"


def test_text_outside_placeholders_is_literal():
    assert expand_template("Inbox/Inbox.md", NOW) == "Inbox/Inbox.md"
    assert expand_template("Journal MM/{{ date }}.md", NOW) == "Journal MM/2024-05-17.md"


def test_multiple_placeholders():
    assert expand_template("{{date:YYYY}}/{{date:MM}}/{{date}}.md", NOW) == "2024/05/2024-05-17.md"


def test_format_date_keeps_unknown_characters():
    assert format_date(NOW, "YYYY [week] DD") == "2024 [week] 17"
