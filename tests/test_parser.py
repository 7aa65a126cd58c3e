"""Tests for reading notes from disk."""

from notes_to_notion.parser import parse_front_matter_and_remainder, parse_note


def test_parse_note_uses_front_matter(tmp_path):
    path = tmp_path / "2024-05-01 standup.md"
    path.write_text('---\nid: abc123\ntitle: "Daily standup"\n---\n# Agenda\n\nNothing.\n')

    doc = parse_note(path)

    assert doc.id == "abc123"
    assert doc.title == "Daily standup"
    assert doc.body == "# Agenda\n\nNothing.\n"


def test_parse_note_falls_back_to_file_name(tmp_path):
    path = tmp_path / "ideas.md"
    path.write_text("Just a body.")

    doc = parse_note(path)

    assert doc.id == "ideas"
    assert doc.title == "ideas"
    assert doc.body == "Just a body."


def test_unterminated_front_matter_is_body():
    front_matter, body = parse_front_matter_and_remainder("---\ntitle: x\nno end")

    assert front_matter == {}
    assert body == "---\ntitle: x\nno end"
