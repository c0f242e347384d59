import argparse
import json
import os
import uuid as _uuid
from pathlib import Path

from config.settings import get_settings
from models import ApprovalState, ApprovalUpdateRequest
from pipelines.dashboard import load_dashboard
from services.aggregation import filter_leads
from services.approval import ApprovalUpdater
from services.reporting import default_export_filename, export_leads_csv, print_summary
from services.sink_client import build_default_sink
from utils.logging_setup import init_logging


def _reader(settings):
    # Resolved at call time so tests can swap the export client
    from sources import sheet_export
    return sheet_export.SheetExportClient(settings)


def _load(settings):
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    return load_dashboard(_reader(settings), settings)


def cmd_load(args):
    settings = get_settings()
    data = _load(settings)
    print_summary(data)


def cmd_leads(args):
    settings = get_settings()
    data = _load(settings)
    leads = filter_leads(data.unified_leads, args.post, args.search)
    if args.json:
        print(json.dumps([lead.model_dump(mode="json") for lead in leads], indent=2, ensure_ascii=False))
        return
    for lead in leads:
        print(f"{lead.key}\t{lead.first_name} {lead.last_name}\t{lead.profile_url}\t{lead.post_url}")
    print(f"{len(leads)} leads")


def cmd_export(args):
    settings = get_settings()
    data = _load(settings)
    leads = filter_leads(data.unified_leads, args.post, args.search)
    try:
        body = export_leads_csv(leads)
    except ValueError as e:
        print(str(e))
        raise SystemExit(1)
    output = Path(args.output) if args.output else Path(default_export_filename())
    output.write_text(body, encoding="utf-8")
    print(f"Exported {len(leads)} leads to {output}")


def cmd_messages(args):
    settings = get_settings()
    data = _load(settings)
    for m in data.messages:
        print(f"{m.ordinal}\t{m.approval_state.display_label}\t{m.first_name} {m.last_name}\t{m.post_url}")
    print(f"{len(data.messages)} messages")


def cmd_update_approval(args):
    settings = get_settings()
    request = ApprovalUpdateRequest(
        ordinal=args.ordinal,
        target_state=ApprovalState(args.state),
        first_name=args.first_name,
        last_name=args.last_name,
        post_url=args.post_url,
        current_state=ApprovalState(args.current_state) if args.current_state else None,
    )
    updater = ApprovalUpdater(_reader(settings), build_default_sink(settings), settings)
    result = updater.apply(request)
    print(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
    if not result.success:
        raise SystemExit(1)


def cmd_serve(args):
    from web.app import create_app
    app = create_app()
    app.run(host=args.host, port=args.port)


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="Sheet reconciliation dashboard CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_load = sub.add_parser("load", help="Load every tab and print a summary")
    p_load.set_defaults(func=cmd_load)

    p_leads = sub.add_parser("leads", help="List unified leads")
    p_leads.add_argument("--post", default=None, help="Only leads from this post URL")
    p_leads.add_argument("--search", default=None, help="Case-insensitive text search")
    p_leads.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    p_leads.set_defaults(func=cmd_leads)

    p_exp = sub.add_parser("export", help="Write unified leads as a report CSV")
    p_exp.add_argument("--post", default=None, help="Only leads from this post URL")
    p_exp.add_argument("--search", default=None, help="Case-insensitive text search")
    p_exp.add_argument("--output", "-o", default=None, help="Output path (default: leads-export-<timestamp>.csv)")
    p_exp.set_defaults(func=cmd_export)

    p_msg = sub.add_parser("messages", help="List message queue entries")
    p_msg.set_defaults(func=cmd_messages)

    states = [ApprovalState.PENDING.value, ApprovalState.REJECTED.value]
    p_upd = sub.add_parser("update-approval", help="Change the approval state of one message")
    p_upd.add_argument("--ordinal", type=int, required=True, help="Message ordinal as listed by 'messages'")
    p_upd.add_argument("--state", choices=states, required=True, help="Target approval state")
    p_upd.add_argument("--first-name", default=None)
    p_upd.add_argument("--last-name", default=None)
    p_upd.add_argument("--post-url", default=None)
    p_upd.add_argument("--current-state", choices=[s.value for s in ApprovalState], default=None)
    p_upd.set_defaults(func=cmd_update_approval)

    p_srv = sub.add_parser("serve", help="Run the HTTP API")
    p_srv.add_argument("--host", default=settings.web_host)
    p_srv.add_argument("--port", type=int, default=settings.web_port)
    p_srv.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
