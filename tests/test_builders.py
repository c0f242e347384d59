from __future__ import annotations

import pytest

from models import ApprovalState, EngagementKind, SheetKind
from services.csv_codec import decode_csv
from sources.base import TabContext, admit_contact_row, walk_admitted_rows
from sources.directory_tab import DirectoryTabBuilder
from sources.lead_tab import LeadTabBuilder
from sources.message_tab import MessageTabBuilder
from sources.profile_tab import ProfileTabBuilder, classify_engagement


POST_TAB = "\n".join([
    "First Name,Last Name,Profile URL,Linkedin Post,Engagement Type,Company",
    "Jane,Doe,https://li.com/in/jd,https://linkedin.com/posts/other,Liked,Acme",
    ",,,,,",
    ",,https://li.com/in/ghost,,,",
    "Max,,,,Commented on post,",
])

LAUNCH_TAB = TabContext(tab_id=42, topic="Launch", source_url="https://linkedin.com/posts/abc")


def test_profile_ordinals_count_admitted_rows_only():
    entries = ProfileTabBuilder().build(decode_csv(POST_TAB), LAUNCH_TAB)
    assert [e.ordinal for e in entries] == [1, 2]
    assert [e.first_name for e in entries] == ["Jane", "Max"]


def test_profile_fields_and_tab_context():
    jane, max_ = ProfileTabBuilder().build(decode_csv(POST_TAB), LAUNCH_TAB)
    assert jane.post_url == "https://linkedin.com/posts/other"
    assert jane.engagement_kind is EngagementKind.LIKED
    assert jane.company == "Acme"
    assert jane.source_tab_id == 42
    assert jane.source_topic == "Launch"
    # empty post cell falls back to the directory entry's post
    assert max_.post_url == "https://linkedin.com/posts/abc"
    assert max_.engagement_kind is EngagementKind.COMMENTED
    assert max_.company is None


def test_walk_reports_sheet_rows():
    builder = ProfileTabBuilder()
    admitted = list(walk_admitted_rows(decode_csv(POST_TAB), builder.admit, LAUNCH_TAB))
    assert [(a.ordinal, a.sheet_row) for a in admitted] == [(1, 2), (2, 5)]


def test_contact_row_needs_name_and_link_without_fallback():
    rows = decode_csv("\n".join([
        "First Name,Last Name,Profile URL,Linkedin Post",
        "Zed,Roe,,",
        "Amy,,https://li.com/in/amy,",
    ]))
    entries = ProfileTabBuilder().build(rows, TabContext(tab_id=1))
    assert [(e.ordinal, e.first_name) for e in entries] == [(1, "Amy")]


def test_admit_contact_row_accepts_post_author():
    from services.columns import ColumnMap

    columns = ColumnMap(["Last Name", "Linkedin Post User"])
    assert admit_contact_row(columns, ["Roe", "Some Author"], TabContext())
    assert not admit_contact_row(columns, ["Roe", ""], TabContext())


def test_header_only_or_empty_tab_builds_nothing():
    assert ProfileTabBuilder().build([], LAUNCH_TAB) == []
    assert ProfileTabBuilder().build([["First Name", "Profile URL"]], LAUNCH_TAB) == []


@pytest.mark.parametrize("raw, expected", [
    ("Commented", EngagementKind.COMMENTED),
    ("comment", EngagementKind.COMMENTED),
    ("Liked", EngagementKind.LIKED),
    ("Reaction", EngagementKind.LIKED),
    ("", None),
    (None, None),
])
def test_classify_engagement(raw, expected):
    assert classify_engagement(raw) is expected


def test_directory_entries_and_tab_ids():
    rows = decode_csv("\n".join([
        "Post_URL,Sheet_Link,Post Topic",
        "https://linkedin.com/posts/a,https://docs.google.com/spreadsheets/d/X/edit#gid=42,Launch",
        "https://linkedin.com/posts/b,https://docs.google.com/spreadsheets/d/X/edit?gid=7&foo=1,Hiring",
        ",,Orphan topic",
        "https://linkedin.com/posts/c,,No tab",
    ]))
    entries = DirectoryTabBuilder().build(rows, TabContext(tab_id=585392388))
    assert [(e.topic, e.tab_id) for e in entries] == [("Launch", 42), ("Hiring", 7), ("No tab", None)]
    assert entries[0].source_url == "https://linkedin.com/posts/a"


def test_message_admission_and_approval_states():
    rows = decode_csv("\n".join([
        "First Name,Last Name,Linkedin Post,Profile URL,DM,Approval",
        "Ann,Lee,https://linkedin.com/posts/p1,https://li.com/in/ann,Hi Ann,Approved",
        ",,,https://li.com/in/anon,Hi,Rejected",
        "Cy,Sun,,,Hi Cy,Sent",
        "Di,,,,Hi Di,whatever",
        ",,,,Orphan DM,",
        "Ed,,,,Hi,",
    ]))
    entries = MessageTabBuilder().build(rows, TabContext(tab_name="Send_Message"))
    assert [(e.ordinal, e.approval_state) for e in entries] == [
        (1, ApprovalState.PENDING),
        (2, ApprovalState.REJECTED),
        (3, ApprovalState.SENT),
        (4, ApprovalState.PENDING),
        (5, ApprovalState.PENDING),
    ]
    assert entries[0].post_url == "https://linkedin.com/posts/p1"
    assert entries[1].profile_url == "https://li.com/in/anon"


def test_lead_entries_take_topic_from_row():
    rows = decode_csv("\n".join([
        "First Name,Last Name,Profile URL,Linkedin Post,Post Topic",
        "Jane,Doe,https://li.com/in/jd,https://linkedin.com/posts/abc,Launch",
        "Nobody,Here,,,",
        "Kim,Lo,,https://linkedin.com/posts/xyz,",
    ]))
    leads = LeadTabBuilder().build(rows, TabContext(tab_name="Combined Leads"))
    assert [(lead.ordinal, lead.first_name, lead.source_topic) for lead in leads] == [(1, "Jane", "Launch"), (2, "Kim", None)]


def test_registry_knows_every_record_kind():
    import sources  # noqa: F401
    from sources.registry import available_builders, get_builder

    kinds = set(available_builders())
    assert kinds == {SheetKind.DIRECTORY, SheetKind.PROFILE_DATA, SheetKind.LEAD_DATA, SheetKind.MESSAGE_QUEUE}
    assert get_builder(SheetKind.MESSAGE_QUEUE).kind is SheetKind.MESSAGE_QUEUE


def test_registry_unknown_kind_raises():
    from sources.registry import get_builder

    with pytest.raises(KeyError):
        get_builder(SheetKind.UNRECOGNIZED)


def test_last_name_and_profile_url_is_enough():
    rows = decode_csv("\n".join([
        "First Name,Last Name,Profile URL,Linkedin Post,Linkedin Post User",
        ",Doe,https://li.com/in/jd,,",
        "Jane,,,,",
    ]))
    entries = ProfileTabBuilder().build(rows, TabContext(tab_id=1))
    assert [(e.ordinal, e.last_name, e.first_name) for e in entries] == [(1, "Doe", "")]
