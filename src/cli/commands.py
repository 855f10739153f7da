import argparse
import sys
import uuid
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from rich import print
from rich.table import Table

from src.core.config import settings
from src.core.errors import ImageDecodeFailure, ScanNotFound
from src.core.schemas import ScanResult, TimeWindow
from src.services.classification_service import ClassificationOrchestrator
from src.services.classifier_adapters import get_classifier
from src.services.guidance_service import PREVENTION_TIPS, guidance_for
from src.services.history_service import (
	conditions_by_confidence,
	filter_by_window,
	format_health_score,
	health_score,
	highest_risk,
	monthly_count,
	risk_breakdown,
)
from src.services.store_service import get_store
from src.utils.io import scans_to_dataframe


def _now() -> datetime:
	return datetime.now(ZoneInfo(settings.timezone))


def _store(args):
	return get_store(args.store, args.data_dir)


def _print_scan(scan: ScanResult, with_guidance: bool = False):
	table = Table(title=f"Scan {scan.id}  ({scan.timestamp:%Y-%m-%d %H:%M})")
	table.add_column("Condition")
	table.add_column("Risk")
	table.add_column("Confidence", justify="right")
	for c in conditions_by_confidence(scan):
		table.add_row(c.name, f"[{c.risk.color}]{c.risk.label}", f"{c.confidence:.0%}")
	print(table)
	counts = risk_breakdown(scan)
	print(", ".join(f"{level.label}: {n}" for level, n in counts.items() if n))
	if with_guidance:
		for c in conditions_by_confidence(scan):
			g = guidance_for(c)
			print(f"\n[bold]{g.name}[/bold] - {g.advisory_title}")
			print(g.description)
			for r in g.recommendations:
				print(f"  • {r}")
		print("\n[bold]Prevention Tips[/bold]")
		for tip in PREVENTION_TIPS:
			print(f"  • {tip}")


def cmd_scan(args):
	image_bytes = Path(args.image).read_bytes()
	orchestrator = ClassificationOrchestrator(get_classifier(args.classifier_url))
	try:
		scan = orchestrator.run_sync(image_bytes)
	except ImageDecodeFailure as e:
		print(f"[red]Could not read image {args.image}: {e}")
		return 2
	if not args.dry_run:
		_store(args).insert(scan)
		print(f"[green]Saved scan {scan.id}")
	_print_scan(scan, with_guidance=args.guidance)
	return 0


def cmd_history(args):
	now = _now()
	snapshot = _store(args).list_all()
	window = TimeWindow(args.window)
	scans = filter_by_window(snapshot, window, now)

	table = Table(title=f"Scan history ({window.value})")
	table.add_column("ID")
	table.add_column("Date")
	table.add_column("Headline risk")
	table.add_column("Conditions", justify="right")
	for s in scans:
		top = highest_risk(s)
		table.add_row(str(s.id), f"{s.timestamp:%Y-%m-%d %H:%M}", f"[{top.risk.color}]{top.risk.label}", str(len(s.conditions)))
	print(table)
	print(f"Scans this month: {monthly_count(snapshot, now)}")
	print(f"Health score: {format_health_score(health_score(scans))}")
	return 0


def cmd_show(args):
	try:
		scan = _store(args).get(uuid.UUID(args.id))
	except ScanNotFound as e:
		print(f"[red]{e}")
		return 1
	_print_scan(scan, with_guidance=True)
	return 0


def cmd_delete(args):
	try:
		_store(args).delete(uuid.UUID(args.id))
	except ScanNotFound as e:
		print(f"[red]{e}")
		return 1
	print(f"[green]Deleted scan {args.id}")
	return 0


def cmd_export(args):
	scans = filter_by_window(_store(args).list_all(), TimeWindow(args.window), _now())
	df = scans_to_dataframe(scans)
	if str(args.out).lower().endswith(".xlsx"):
		df.to_excel(args.out, index=False)
	else:
		df.to_csv(args.out, index=False)
	print(f"[green]Wrote {len(scans)} scans → {args.out}")
	return 0


def build_argparser():
	ap = argparse.ArgumentParser(prog="dentscan")
	ap.add_argument("--store", required=False, choices=["json", "memory"], help="Store backend (default from env)")
	ap.add_argument("--data-dir", required=False, help="Directory of the json store (default from env)")
	sub = ap.add_subparsers(dest="cmd", required=True)
	windows = [w.value for w in TimeWindow]

	ap_s = sub.add_parser("scan")
	ap_s.add_argument("--image", required=True)
	ap_s.add_argument("--classifier-url", required=False, help="Model server endpoint (default from env)")
	ap_s.add_argument("--dry-run", action="store_true", help="Classify without saving")
	ap_s.add_argument("--guidance", action="store_true", help="Print per-condition guidance")
	ap_s.set_defaults(func=cmd_scan)

	ap_h = sub.add_parser("history")
	ap_h.add_argument("--window", choices=windows, default=TimeWindow.All.value)
	ap_h.set_defaults(func=cmd_history)

	ap_sh = sub.add_parser("show")
	ap_sh.add_argument("--id", required=True)
	ap_sh.set_defaults(func=cmd_show)

	ap_d = sub.add_parser("delete")
	ap_d.add_argument("--id", required=True)
	ap_d.set_defaults(func=cmd_delete)

	ap_e = sub.add_parser("export")
	ap_e.add_argument("--out", required=True)
	ap_e.add_argument("--window", choices=windows, default=TimeWindow.All.value)
	ap_e.set_defaults(func=cmd_export)

	return ap


def main(argv=None):
	ap = build_argparser()
	args = ap.parse_args(argv)
	sys.exit(args.func(args))
