from __future__ import annotations

import logging

from models import ApprovalState, LeadSource
from pipelines.dashboard import load_dashboard
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import LoadDirectory, MergeLeads
from utils.logging_setup import SafeExtraFormatter


DIRECTORY_GID = 585392388

DIRECTORY_TAB = "\n".join([
    "Post_URL,Sheet_Link,Post Topic",
    "https://linkedin.com/posts/abc,https://docs.google.com/spreadsheets/d/X/edit#gid=42,Launch",
])

POST_TAB_42 = "\n".join([
    "First Name,Last Name,Profile URL,Linkedin Post",
    "Jane,Doe,https://li.com/in/jd,https://linkedin.com/posts/abc",
])


def _two_post_directory(*gids):
    lines = ["Post_URL,Sheet_Link,Post Topic"]
    for gid in gids:
        lines.append(f"https://linkedin.com/posts/p{gid},https://docs.google.com/spreadsheets/d/X/edit#gid={gid},Topic {gid}")
    return "\n".join(lines)


def test_single_post_end_to_end(make_reader, settings):
    reader = make_reader({DIRECTORY_GID: DIRECTORY_TAB, 42: POST_TAB_42})

    data = load_dashboard(reader, settings)

    assert data.error is None
    assert len(data.directory) == 1
    assert data.directory[0].tab_id == 42
    assert [(p.ordinal, p.first_name, p.source_topic, p.source_tab_id) for p in data.profiles] == [(1, "Jane", "Launch", 42)]
    assert len(data.unified_leads) == 1
    assert data.unified_leads[0].source is LeadSource.SCRAPED
    assert data.stats.total_scraped == 1
    assert data.stats.total_posts == 1
    assert data.leads == []
    assert data.messages == []
    assert data.post_stats[0].total == 1


def test_directory_falls_back_to_tab_names(make_reader, settings):
    reader = make_reader({
        DIRECTORY_GID: POST_TAB_42,
        "IndexSheet1": DIRECTORY_TAB,
        42: POST_TAB_42,
    })

    data = load_dashboard(reader, settings)

    assert len(data.directory) == 1
    assert reader.calls[:3] == [DIRECTORY_GID, "Index", "IndexSheet1"]


def test_missing_directory_still_loads_leads_and_messages(make_reader, settings):
    reader = make_reader({
        "Combined Leads": "First Name,Last Name,Profile URL,Linkedin Post\nKim,Lo,https://li.com/in/kim,https://linkedin.com/posts/abc",
        "Send_Message": "First Name,Last Name,Linkedin Post,Profile URL,DM,Approval\nAnn,Lee,https://linkedin.com/posts/abc,https://li.com/in/ann,Hi,Approved",
    })

    data = load_dashboard(reader, settings)

    assert data.error is None
    assert data.directory == []
    assert data.profiles == []
    assert [lead.first_name for lead in data.leads] == ["Kim"]
    assert [m.first_name for m in data.messages] == ["Ann"]
    assert [(u.source, u.first_name) for u in data.unified_leads] == [(LeadSource.COMBINED, "Kim")]
    assert data.stats.total_posts == 0
    assert "Combined Leads" in reader.calls
    assert "Send_Message" in reader.calls


def test_empty_sheet_loads_without_error(make_reader, settings):
    data = load_dashboard(make_reader({}), settings)
    assert data.error is None
    assert data.unified_leads == []
    assert data.stats.total_posts == 0


def test_unexpected_failure_is_reported_in_error(make_reader, settings):
    data = load_dashboard(make_reader({DIRECTORY_GID: RuntimeError("boom")}), settings)
    assert "boom" in data.error
    assert data.directory == []


def test_post_tabs_keep_directory_order_and_skip_bad_tabs(make_reader, settings):
    reader = make_reader({
        DIRECTORY_GID: _two_post_directory(41, 42, 43, 44, 45),
        # 41 is missing entirely
        42: POST_TAB_42,
        43: "First Name,Last Name,Profile URL\nMax,Roe,https://li.com/in/max\nAmy,Fox,https://li.com/in/amy",
        44: "First Name,Last Name,Profile URL,DM,Approval\nAnn,Lee,https://li.com/in/ann,Hi,Approved",
        45: "Foo,Bar\n1,2",
    })

    data = load_dashboard(reader, settings)

    assert len(data.directory) == 5
    assert [(p.first_name, p.ordinal, p.source_tab_id) for p in data.profiles] == [
        ("Jane", 1, 42),
        ("Max", 1, 43),
        ("Amy", 2, 43),
    ]
    # rows without a post cell inherit the directory's post URL
    assert data.profiles[1].post_url == "https://linkedin.com/posts/p43"
    assert [s.total for s in data.post_stats] == [0, 1, 2, 0, 0]


def test_combined_leads_by_name_are_merged_without_duplicates(make_reader, settings):
    reader = make_reader({
        DIRECTORY_GID: DIRECTORY_TAB,
        42: POST_TAB_42,
        "Combined Leads": "\n".join([
            "First Name,Last Name,Profile URL,Linkedin Post",
            "jane,DOE,https://li.com/in/jd,https://www.linkedin.com/posts/abc/",
            "Kim,Lo,https://li.com/in/kim,https://linkedin.com/posts/abc",
        ]),
    })

    data = load_dashboard(reader, settings)

    assert len(data.leads) == 2
    assert data.stats.total_leads == 2
    assert [(u.source, u.first_name) for u in data.unified_leads] == [
        (LeadSource.SCRAPED, "Jane"),
        (LeadSource.COMBINED, "Kim"),
    ]


def test_message_queue_is_loaded(make_reader, settings):
    reader = make_reader({
        DIRECTORY_GID: DIRECTORY_TAB,
        42: POST_TAB_42,
        "Send_Message": "\n".join([
            "First Name,Last Name,Linkedin Post,Profile URL,DM,Approval",
            "Ann,Lee,https://linkedin.com/posts/abc,https://li.com/in/ann,Hi Ann,Rejected",
        ]),
    })

    data = load_dashboard(reader, settings)

    assert [(m.ordinal, m.approval_state) for m in data.messages] == [(1, ApprovalState.REJECTED)]


def test_pipeline_runs_steps_in_order(make_reader, settings):
    reader = make_reader({DIRECTORY_GID: DIRECTORY_TAB})
    ctx = Pipeline([LoadDirectory(reader, settings), MergeLeads()]).run(RunContext())
    assert len(ctx.directory) == 1
    assert ctx.unified == []
    assert ctx.meta["directory_tab"] == f"gid={DIRECTORY_GID}"


def test_load_logs_carry_the_run_id(make_reader, settings, monkeypatch, caplog):
    monkeypatch.setenv("RUN_ID", "run-123")
    with caplog.at_level(logging.DEBUG):
        load_dashboard(make_reader({DIRECTORY_GID: DIRECTORY_TAB, 42: POST_TAB_42}), settings)
    tagged = [r for r in caplog.records if getattr(r, "step", None) in ("dashboard", "LoadDirectory", "MergeLeads")]
    assert tagged
    assert {r.run_id for r in tagged} == {"run-123"}


def test_safe_formatter_fills_missing_extras():
    formatter = SafeExtraFormatter(fmt="%(message)s step=%(step)s tab=%(tab)s run_id=%(run_id)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    assert formatter.format(record) == "hello step=- tab=- run_id=-"
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    record.run_id = "abc"
    assert formatter.format(record) == "hello step=- tab=- run_id=abc"
